#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
报告生成器
负责控制台输出以及可选的报告文件保存
"""

import os
import json
from typing import Dict, Optional
from datetime import datetime

from .stress_test_core import StressTestResult


def format_banner(result: StressTestResult) -> str:
    """压测开始时的提示行"""
    return f"Starting stress test at {result.start_time.strftime('%Y-%m-%d %H:%M:%S')}"


def format_summary(result: StressTestResult) -> str:
    """压测结束后的结果汇总"""
    lines = [
        f"Total requests: {result.total_requests}",
        f"Total Time: {result.duration_text}",
        f"QPS: {result.qps:.2f}",
    ]
    return "\n".join(lines)


def generate_report_text(result: StressTestResult, test_config: Optional[Dict] = None) -> str:
    """生成测试报告文本"""
    lines = []

    lines.append("="*80)
    lines.append("Stress test report")
    lines.append("="*80)
    lines.append(f"Start time: {result.start_time.strftime('%Y-%m-%d %H:%M:%S')}")

    if test_config:
        lines.append("\n[Config]")
        for key, value in test_config.items():
            lines.append(f"  {key}: {value}")

    lines.append("\n[Result]")
    lines.append(f"  Workers: {len(result.worker_counts)}")
    lines.append(f"  Total requests: {result.total_requests}")
    lines.append(f"  Total Time: {result.duration_text}")
    lines.append(f"  Elapsed: {result.elapsed:.2f}s")
    lines.append(f"  QPS: {result.qps:.2f}")

    lines.append("="*80)

    return "\n".join(lines)


def save_reports(
    result: StressTestResult,
    test_config: Dict,
    output_dir: str,
    save_json: bool = False
) -> Dict[str, str]:
    """
    统一的报告保存接口

    Args:
        result: 测试结果对象
        test_config: 测试配置
        output_dir: 输出目录
        save_json: 是否保存JSON报告

    Returns:
        {
            'text_report': 'path/to/text_report.txt',
            'json_report': 'path/to/json_report.json'  # 可选
        }
    """
    os.makedirs(output_dir, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

    text_file = os.path.join(output_dir, f"stress_test_report_{timestamp}.txt")
    with open(text_file, 'w', encoding='utf-8') as f:
        f.write(generate_report_text(result, test_config))

    reports = {'text_report': text_file}

    if save_json:
        json_file = os.path.join(output_dir, f"stress_test_report_{timestamp}.json")
        report_data = {
            'test_config': test_config or {},
            'statistics': result.get_statistics(),
        }
        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(report_data, f, ensure_ascii=False, indent=2)
        reports['json_report'] = json_file

    return reports
