from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

LOG_FORMAT = "%(asctime)s %(levelname)s runId=%(runId)s comp=%(component)s msg=%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
LOGGER_NAMESPACE = "stfCleaner"

_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


class EnsureFieldsFilter(logging.Filter):
    """
    Назначение:
        Подставляет runId и component в LogRecord, если вызывающий код их не передал.
    """

    def __init__(self, runId: str, defaultComponent: str = "core"):
        super().__init__()
        self.runId = runId
        self.defaultComponent = defaultComponent

    def filter(self, record: logging.LogRecord) -> bool:
        record.runId = getattr(record, "runId", self.runId)
        record.component = getattr(record, "component", self.defaultComponent)
        return True


class LoggedStream:
    """
    Назначение/ответственность:
        Поток-обёртка над sys.stdout/sys.stderr: текст уходит в исходный поток
        без изменений, а каждая законченная непустая строка дублируется в лог команды.

    Ограничения:
        - Хвост без перевода строки попадает в лог только при flush().
    """

    def __init__(self, primary: TextIO, logger: logging.Logger, level: int, runId: str, component: str):
        self.primary = primary
        self.logger = logger
        self.level = level
        self.extra = {"runId": runId, "component": component}
        self.encoding = getattr(primary, "encoding", None) or "utf-8"
        self._pending = ""

    def write(self, s: str) -> int:
        written = self.primary.write(s)
        self._pending += s
        *complete, self._pending = self._pending.split("\n")
        for line in complete:
            self._emit(line)
        return written

    def flush(self) -> None:
        self.primary.flush()
        self._emit(self._pending)
        self._pending = ""

    def _emit(self, line: str) -> None:
        if line.strip():
            self.logger.log(self.level, line.rstrip(), extra=self.extra)


@contextmanager
def teeStdStreams(logger: logging.Logger, runId: str) -> Iterator[None]:
    """
    Назначение:
        На время блока дублирует stdout (INFO) и stderr (ERROR) в лог команды.

    Поведение:
        - Исходные потоки восстанавливаются при любом выходе из блока.
    """
    originalStdout, originalStderr = sys.stdout, sys.stderr
    sys.stdout = LoggedStream(originalStdout, logger, logging.INFO, runId, "stdout")
    sys.stderr = LoggedStream(originalStderr, logger, logging.ERROR, runId, "stderr")
    try:
        yield
    finally:
        for stream in (sys.stdout, sys.stderr):
            if isinstance(stream, LoggedStream):
                stream.flush()
        sys.stdout, sys.stderr = originalStdout, originalStderr


def mapLogLevel(levelName: str) -> int:
    """
    Назначение:
        ERROR|WARN|INFO|DEBUG -> уровень logging; иное значение -> ValueError.
    """
    level = _LEVELS.get((levelName or "").strip().upper())
    if level is None:
        raise ValueError(f"Unsupported log level: {levelName}")
    return level


def createCommandLogger(commandName: str, logDir: str, runId: str, logLevel: str) -> tuple[logging.Logger, str]:
    """
    Назначение:
        Логгер одной команды с файлом <logDir>/<command>_<runId>.log.

    Выходные данные:
        (logger, logFilePath)

    Ограничения:
        - Логгер не передаёт записи родителю: вывод только в файл команды.
    """
    level = mapLogLevel(logLevel)
    logPath = Path(logDir) / f"{commandName}_{runId}.log"
    logPath.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(logPath, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(EnsureFieldsFilter(runId=runId))

    logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{commandName}.{runId}")
    closeCommandLogger(logger)
    logger.propagate = False
    logger.setLevel(level)
    logger.addHandler(handler)
    return logger, str(logPath)


def closeCommandLogger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def logEvent(logger: logging.Logger, level: int, runId: str, component: str, message: str) -> None:
    logger.log(level, message, extra={"runId": runId, "component": component})
