from __future__ import annotations

import zipfile
from pathlib import Path

ARCHIVE_PREFIX = "Translations Compressed"


def zipDirectory(sourceDir: str, zipDir: str, stamp: str) -> str:
    """
    Назначение:
        Упаковывает содержимое sourceDir в "<zipDir>/Translations Compressed <stamp>.zip".

    Поведение:
        - Пути внутри архива относительны sourceDir.
        - Нет sourceDir -> FileNotFoundError.
    """
    root = Path(sourceDir)
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {sourceDir}")
    Path(zipDir).mkdir(parents=True, exist_ok=True)
    archivePath = Path(zipDir) / f"{ARCHIVE_PREFIX} {stamp}.zip"
    with zipfile.ZipFile(archivePath, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(root.rglob("*")):
            if path.is_file():
                archive.write(path, arcname=str(path.relative_to(root)))
    return str(archivePath)
