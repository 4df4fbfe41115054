#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心测试引擎
包含压测的核心逻辑：请求构造、工作协程、结果统计等
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import List, Dict, Optional

import aiohttp
from yarl import URL

from .stress_test_config import StressTestConfig

logger = logging.getLogger("stress_test")

# 空闲连接超时（秒）
IDLE_CONN_TIMEOUT = 10


class StressTestResult:
    """压测结果统计"""

    def __init__(self, start_time: datetime, duration: float, duration_text: str):
        self.start_time = start_time
        self.duration = duration  # 配置的持续时间（秒）
        self.duration_text = duration_text
        self.worker_counts: List[int] = []
        self.end_time: Optional[datetime] = None

    @property
    def total_requests(self) -> int:
        return sum(self.worker_counts)

    @property
    def elapsed(self) -> float:
        """实际耗时（秒），包含结束时仍在进行中的请求"""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def qps(self) -> float:
        # 按配置的持续时间计算；持续时间为 0 时记为 0
        if self.duration <= 0:
            return 0.0
        return self.total_requests / self.duration

    def get_statistics(self) -> Dict:
        """获取统计信息"""
        return {
            'start_time': self.start_time.strftime('%Y-%m-%d %H:%M:%S'),
            'total_requests': self.total_requests,
            'duration': self.duration,
            'duration_text': self.duration_text,
            'elapsed': self.elapsed,
            'qps': self.qps,
            'workers': len(self.worker_counts),
            'worker_counts': list(self.worker_counts),
        }


def _describe(error: BaseException) -> str:
    # 超时等异常的 str() 可能为空
    return str(error) or type(error).__name__


def build_request(url: str) -> URL:
    """
    构造请求目标地址

    Raises:
        aiohttp.InvalidURL: 地址不是绝对的 http/https 地址
    """
    try:
        target = URL(url)
    except (TypeError, ValueError) as e:
        raise aiohttp.InvalidURL(url) from e

    if not target.is_absolute() or target.scheme not in ('http', 'https') or not target.host:
        raise aiohttp.InvalidURL(url)
    return target


async def worker(
    session: aiohttp.ClientSession,
    url: str,
    data: bytes,
    cookie: str,
    end: float,
    timeout: Optional[float] = None
) -> int:
    """
    工作协程：在结束时间之前持续发送 POST 请求

    发送失败或读取响应失败只记录日志并继续；请求构造失败则提前结束本协程。

    Returns:
        本协程成功完成的请求数
    """
    count = 0
    headers = {'Cookie': cookie}
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    while time.monotonic() < end:
        try:
            target = build_request(url)
        except aiohttp.InvalidURL as e:
            logger.error("Error creating request: %s", e)
            break

        try:
            response = await session.post(
                target,
                data=data,
                headers=headers,
                timeout=client_timeout
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            # 非法请求头（如 Cookie 中的控制字符）在发送时以 ValueError 报出
            logger.error("Error sending request: %s", _describe(e))
            continue

        try:
            async with response:
                await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Error reading response body: %s", _describe(e))
            continue

        count += 1

    return count


def create_session(concurrency: int) -> aiohttp.ClientSession:
    """创建所有工作协程共享的 HTTP 会话，必须在事件循环中调用"""
    connector = aiohttp.TCPConnector(
        limit=concurrency * 2,
        limit_per_host=concurrency * 2,
        keepalive_timeout=IDLE_CONN_TIMEOUT
    )
    # 不保存响应中的 Cookie，保证每次请求的 Cookie 头与配置完全一致
    return aiohttp.ClientSession(
        connector=connector,
        cookie_jar=aiohttp.DummyCookieJar(),
        timeout=aiohttp.ClientTimeout(total=None)
    )


async def run_stress_test(config: StressTestConfig, on_start=None) -> StressTestResult:
    """
    运行压测

    Args:
        config: 压测配置
        on_start: 可选回调，在开始时间确定后、工作协程启动前以 StressTestResult 调用

    Returns:
        StressTestResult: 测试结果
    """
    async with create_session(config.concurrency) as session:
        result = StressTestResult(datetime.now(), config.duration, config.duration_text)
        end = time.monotonic() + config.duration

        if on_start is not None:
            on_start(result)

        tasks = [
            asyncio.create_task(
                worker(session, config.url, config.data, config.cookie, end, config.timeout)
            )
            for _ in range(config.concurrency)
        ]

        # 等待所有工作协程完成
        result.worker_counts = list(await asyncio.gather(*tasks))

    result.end_time = datetime.now()
    return result
