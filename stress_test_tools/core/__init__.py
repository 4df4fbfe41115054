#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
压测核心模块
提供可复用的压测功能
"""

from .stress_test_config import (
    CONFIG_FILE,
    ConfigError,
    StressTestConfig,
    load_config,
    validate_config,
    parse_duration,
    format_duration,
)
from .stress_test_core import StressTestResult, build_request, worker, run_stress_test
from .stress_test_reporter import format_banner, format_summary, save_reports

__all__ = [
    'CONFIG_FILE',
    'ConfigError',
    'StressTestConfig',
    'load_config',
    'validate_config',
    'parse_duration',
    'format_duration',
    'StressTestResult',
    'build_request',
    'worker',
    'run_stress_test',
    'format_banner',
    'format_summary',
    'save_reports',
]
