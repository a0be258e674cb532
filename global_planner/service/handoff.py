# global_planner/service/handoff.py
from abc import ABC, abstractmethod
from typing import Callable, List

from global_planner.types import Pose


class LocalPlannerClient(ABC):
    """
    下游局部规划器 (Local Planner) 的发送接口
    传输层由外部实现，例如服务调用或消息发布。
    """

    @abstractmethod
    def send_path(self, poses: List[Pose]) -> None:
        """发送简化后的路径；失败时直接抛出异常，由调用方记录"""
        pass


class NullLocalPlannerClient(LocalPlannerClient):
    """不接下游时使用"""
    def send_path(self, poses: List[Pose]) -> None: pass


class CallbackLocalPlannerClient(LocalPlannerClient):
    """把任意可调用对象包装成下游客户端"""

    def __init__(self, callback: Callable[[List[Pose]], None]):
        self.callback = callback

    def send_path(self, poses: List[Pose]) -> None:
        self.callback(poses)
