from __future__ import annotations

import io
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest
import torch
from PIL import Image

from mltestor.services import cv_service


class FakeYOLO:
    """Stand-in for ultralytics.YOLO with a fixed probability vector."""

    instances: List["FakeYOLO"] = []
    scores: List[float] = [0.1, 0.7, 0.2]
    names = {0: "cliff", 1: "tabby cat", 2: "tiger cat"}
    fail_on_load = False
    fail_on_predict = False
    empty = False

    def __init__(self, path: str, task: str | None = None) -> None:
        if FakeYOLO.fail_on_load:
            raise ValueError("corrupt weights")
        self.path = path
        self.task = task
        self.device = None
        self.calls: list = []
        FakeYOLO.instances.append(self)

    def to(self, device: str) -> "FakeYOLO":
        self.device = device
        return self

    def predict(self, source, **kwargs):
        self.calls.append((source, kwargs))
        if FakeYOLO.fail_on_predict:
            raise RuntimeError("inference exploded")
        if FakeYOLO.empty:
            return []
        probs = SimpleNamespace(data=torch.tensor(FakeYOLO.scores))
        return [SimpleNamespace(probs=probs, names=FakeYOLO.names)]


@pytest.fixture
def fake_yolo(monkeypatch):
    FakeYOLO.instances = []
    FakeYOLO.scores = [0.1, 0.7, 0.2]
    FakeYOLO.fail_on_load = False
    FakeYOLO.fail_on_predict = False
    FakeYOLO.empty = False
    monkeypatch.setattr(cv_service, "YOLO", FakeYOLO)
    yield FakeYOLO


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    path = tmp_path / "mltestor-cls.pt"
    path.write_bytes(b"\x00\x01")  # never parsed; the loader is faked
    return path


def png_bytes(size=(64, 48), mode="RGB", color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def image() -> Image.Image:
    return Image.open(io.BytesIO(png_bytes()))


@pytest.fixture
def make_png():
    return png_bytes
