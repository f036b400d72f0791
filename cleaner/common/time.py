from __future__ import annotations

from datetime import datetime


def getNowIso() -> str:
    """
    Назначение:
        Возвращает текущее время в ISO 8601 с timezone.

    Выходные данные:
        str
            Например: 2026-01-11T18:22:10+01:00
    """
    return datetime.now().astimezone().isoformat()


def getFileStamp() -> str:
    """
    Назначение:
        Временная метка, пригодная для имени файла (без ':').

    Выходные данные:
        str
            Например: 2026-01-11 18-22-10
    """
    return datetime.now().strftime("%Y-%m-%d %H-%M-%S")


def getDurationMs(startMonotonic: float, endMonotonic: float) -> int:
    """
    Назначение:
        Считает длительность в миллисекундах по monotonic timestamps.
    """
    return int((endMonotonic - startMonotonic) * 1000)
