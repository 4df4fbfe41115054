from .stress_test import main

main()
