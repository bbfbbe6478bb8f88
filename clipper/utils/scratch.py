"""Scratch directory helpers for per-request download files"""
import logging
import os
import time
from typing import List, Optional

logger = logging.getLogger(__name__)


def find_scratch_files(scratch_dir: str, file_id: str) -> List[str]:
    """Find files that start with the given file_id"""
    if not os.path.isdir(scratch_dir):
        return []
    return sorted(f for f in os.listdir(scratch_dir) if f.startswith(file_id))


def pick_scratch_file(scratch_dir: str, file_id: str, ext: str) -> Optional[str]:
    """Path of the finished output, preferring the expected extension"""
    files = find_scratch_files(scratch_dir, file_id)
    expected = f"{file_id}.{ext}"
    if expected in files:
        return os.path.join(scratch_dir, expected)
    finished = [f for f in files if not f.endswith((".part", ".ytdl", ".temp"))]
    if finished:
        return os.path.join(scratch_dir, finished[0])
    return None


def remove_scratch_files(scratch_dir: str, file_id: str) -> int:
    """Remove every file belonging to file_id, including partial downloads"""
    removed = 0
    for filename in find_scratch_files(scratch_dir, file_id):
        try:
            os.remove(os.path.join(scratch_dir, filename))
            removed += 1
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning(f"Could not remove scratch file {filename}: {e}")
    return removed


def sweep_stale_files(scratch_dir: str, max_age_seconds: int) -> int:
    """Remove files older than max_age_seconds left behind by crashed requests"""
    if not os.path.isdir(scratch_dir):
        return 0

    removed = 0
    current_time = time.time()
    for filename in os.listdir(scratch_dir):
        filepath = os.path.join(scratch_dir, filename)
        if not os.path.isfile(filepath):
            continue
        try:
            age = current_time - os.path.getmtime(filepath)
            if age > max_age_seconds:
                os.remove(filepath)
                removed += 1
                logger.info(f"Removed stale scratch file: {filename} (age: {age:.0f}s)")
        except OSError as e:
            logger.warning(f"Error sweeping {filename}: {e}")
    return removed
