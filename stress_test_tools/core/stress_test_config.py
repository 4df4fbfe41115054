#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置管理模块
负责配置文件的加载、验证，以及持续时间的解析与格式化
"""

import os
import re
import json
from dataclasses import dataclass
from typing import Dict, Any, Optional

import yaml

# 固定的配置文件名（位于当前工作目录）
CONFIG_FILE = 'config.yml'


_DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'μs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}

# "ms" 必须排在 "m" 之前
_DURATION_PART = re.compile(r'(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)')


class ConfigError(ValueError):
    """配置读取、解析或验证失败"""


@dataclass(frozen=True)
class StressTestConfig:
    """一次压测的完整配置，加载后不可修改"""
    url: str
    concurrency: int
    duration: float
    duration_text: str
    data: bytes = b''
    cookie: str = ''
    timeout: Optional[float] = None
    output_dir: Optional[str] = None
    save_json: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """报告中展示用的配置字典"""
        return {
            'url': self.url,
            'concurrency': self.concurrency,
            'duration': self.duration_text,
            'data_bytes': len(self.data),
            'cookie': self.cookie,
            'timeout': self.timeout,
        }


def load_config(config_path: str) -> Dict:
    """
    加载配置文件

    .yml/.yaml 使用 YAML 解析，.json 使用 JSON 解析

    Args:
        config_path: 配置文件路径

    Returns:
        配置字典，空文件返回空字典

    Raises:
        ConfigError: 文件不存在、无法读取或格式错误
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Error reading config file: {config_path} does not exist")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Error reading config file: {e}") from e

    try:
        if config_path.endswith('.json'):
            config = json.loads(content) if content.strip() else None
        else:
            config = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error parsing config file: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError("Error parsing config file: top level must be a mapping")
    return config


def parse_duration(text) -> float:
    """
    解析持续时间表达式，返回秒数

    支持 "30s"、"5m"、"1h30m"、"1.5s"、"300ms" 等写法，可带正负号，
    单独的 "0" 表示零。

    Raises:
        ConfigError: 表达式无法解析
    """
    # YAML 会把未加引号的 0 解析成整数
    if isinstance(text, int) and not isinstance(text, bool):
        text = str(text)
    if not isinstance(text, str):
        raise ConfigError(f"Error parsing duration: invalid duration {text!r}")

    s = text
    sign = 1.0
    if s[:1] in ('-', '+'):
        sign = -1.0 if s[0] == '-' else 1.0
        s = s[1:]
    if s == '0':
        return 0.0
    if not s:
        raise ConfigError(f"Error parsing duration: invalid duration {text!r}")

    total = 0.0
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        if not match:
            raise ConfigError(f"Error parsing duration: invalid duration {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    return sign * total


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(frac).rjust(width, '0').rstrip('0')}"


def format_duration(seconds: float) -> str:
    """把秒数格式化为 "1m30s"、"500ms" 这样的文本"""
    ns = int(round(seconds * 1e9))
    if ns == 0:
        return '0s'

    sign = '-' if ns < 0 else ''
    ns = abs(ns)

    if ns < 1000:
        return f"{sign}{ns}ns"
    if ns < 1000 ** 2:
        return f"{sign}{_fraction(ns, 1000)}µs"
    if ns < 1000 ** 3:
        return f"{sign}{_fraction(ns, 1000 ** 2)}ms"

    hours, rem = divmod(ns, 3600 * 1000 ** 3)
    minutes, rem = divmod(rem, 60 * 1000 ** 3)
    secs = _fraction(rem, 1000 ** 3)

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def validate_config(config: Dict) -> StressTestConfig:
    """
    验证配置完整性并生成 StressTestConfig

    Args:
        config: 配置字典

    Returns:
        验证通过的配置对象

    Raises:
        ConfigError: 当配置验证失败时
    """
    # 必需参数检查
    for key in ('url', 'concurrency', 'duration'):
        if key not in config or config[key] is None:
            raise ConfigError(f"Config file is missing required key: {key}")

    url = config['url']
    if not isinstance(url, str):
        raise ConfigError("url must be a string")

    concurrency = config['concurrency']
    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        raise ConfigError(f"concurrency must be a positive integer, got {concurrency!r}")

    duration = parse_duration(config['duration'])
    if duration < 0:
        raise ConfigError(f"Error parsing duration: negative duration {config['duration']!r}")

    data = config.get('data')
    data = '' if data is None else data
    cookie = config.get('cookie')
    cookie = '' if cookie is None else cookie
    if not isinstance(data, str) or not isinstance(cookie, str):
        raise ConfigError("data and cookie must be strings")

    timeout = config.get('timeout')
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"timeout must be a positive number, got {timeout!r}")
        timeout = float(timeout)

    output_dir = config.get('output_dir')
    if output_dir is not None and not isinstance(output_dir, str):
        raise ConfigError(f"output_dir must be a string, got {output_dir!r}")

    return StressTestConfig(
        url=url,
        concurrency=concurrency,
        duration=duration,
        duration_text=format_duration(duration),
        data=data.encode('utf-8'),
        cookie=cookie,
        timeout=timeout,
        output_dir=output_dir,
        save_json=bool(config.get('json', False)),
    )
