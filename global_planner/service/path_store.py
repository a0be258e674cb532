# global_planner/service/path_store.py
import os
from abc import ABC, abstractmethod
from typing import List

import pandas as pd

from global_planner.types import Vector3

_COLUMNS = ["x", "y", "z"]


class PathRecorder(ABC):
    """最终路径的持久化接口 (用于诊断)"""

    @abstractmethod
    def save(self, path: List[Vector3]) -> None:
        pass


class CsvPathRecorder(PathRecorder):
    """
    每次规划覆盖写入一个 CSV 文件，列为 x, y, z
    """
    def __init__(self, file_path: str):
        self.file_path = file_path

    def save(self, path: List[Vector3]) -> None:
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        df = pd.DataFrame([p.as_tuple() for p in path], columns=_COLUMNS)
        df.to_csv(self.file_path, index=False)


def load_path(file_path: str) -> List[Vector3]:
    """读回 CsvPathRecorder 写出的路径"""
    df = pd.read_csv(file_path)
    missing = [c for c in _COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{file_path} is missing columns {missing}")
    return [Vector3(float(r.x), float(r.y), float(r.z)) for r in df.itertuples(index=False)]
