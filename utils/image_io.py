"""Image and video I/O using OpenCV."""

from pathlib import Path
from typing import Iterator, Optional

import cv2
import numpy as np

VIDEO_EXTENSIONS = {'.mp4', '.avi', '.mov', '.mkv', '.webm', '.m4v'}

_FOURCC_BY_EXTENSION = {'.avi': 'MJPG', '.webm': 'VP80'}


def is_video(path: str) -> bool:
    return Path(path).suffix.lower() in VIDEO_EXTENSIONS


def load_image(path: str) -> np.ndarray:
    """Load image as RGB uint8."""
    img = cv2.imread(path)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def save_image(image: np.ndarray, path: str) -> None:
    """Save RGB image."""
    if not cv2.imwrite(path, cv2.cvtColor(image, cv2.COLOR_RGB2BGR)):
        raise ValueError(f"Could not write image to {path}")


def read_video_frames(path: str) -> Iterator[np.ndarray]:
    """Yield the frames of a video file as RGB uint8."""
    capture = cv2.VideoCapture(path)
    if not capture.isOpened():
        raise ValueError(f"Could not open video {path}")
    try:
        while True:
            ok, frame = capture.read()
            if not ok:
                break
            yield cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    finally:
        capture.release()


def video_fps(path: str, default: float = 30.0) -> float:
    capture = cv2.VideoCapture(path)
    try:
        fps = capture.get(cv2.CAP_PROP_FPS)
    finally:
        capture.release()
    return fps if fps and fps > 0 else default


class VideoSink:
    """Writes RGB frames to a video file; opened lazily on the first frame.

    Without an explicit ``fourcc`` the codec follows the file extension.
    """

    def __init__(self, path: str, fps: float = 30.0, fourcc: Optional[str] = None):
        self.path = path
        self.fps = fps
        self.fourcc = fourcc or _FOURCC_BY_EXTENSION.get(Path(path).suffix.lower(), 'mp4v')
        self._writer: Optional[cv2.VideoWriter] = None
        self.frames_written = 0

    def write(self, frame: np.ndarray) -> None:
        if self._writer is None:
            h, w = frame.shape[:2]
            self._writer = cv2.VideoWriter(self.path, cv2.VideoWriter_fourcc(*self.fourcc), self.fps, (w, h))
            if not self._writer.isOpened():
                raise ValueError(f"Could not open video writer for {self.path}")
        self._writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
        self.frames_written += 1

    def close(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
