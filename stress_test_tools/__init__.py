#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
POST 压测工具
"""

__version__ = '0.1.0'
