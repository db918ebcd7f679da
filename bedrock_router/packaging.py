"""Build one deployment zip per Lambda.

Usage:
  python -m bedrock_router.packaging [--dist-dir dist]

For every handler in LAMBDAS this produces:

  <dist>/lambdas/<lambda-name>/lambda_function.py   (handler: lambda_function.lambda_handler)
  <dist>/lambdas/<lambda-name>/bedrock_router/...
  <dist>/lambdas/<lambda-name>.zip

boto3 ships with the Lambda Python runtime and is not bundled.
"""
from __future__ import annotations

import argparse
import shutil
import zipfile
from pathlib import Path
from typing import List, Optional, Sequence

from .utils.logging_util import get_logger

logger = get_logger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent

LAMBDAS = [
    "primary-lambda",
    "fallback-lambda",
    "degradation-lambda",
]

ENTRY_FILENAME = "lambda_function.py"


def entry_module_path(lambda_name: str, package_dir: Path = PACKAGE_DIR) -> Path:
    return package_dir / "lambdas" / f"{lambda_name.replace('-', '_')}.py"


def _ignore(directory: str, names: List[str]) -> List[str]:
    return [n for n in names if n == "__pycache__" or n.endswith(".pyc")]


def zip_directory(source_dir: Path, zip_path: Path) -> Path:
    if zip_path.exists():
        zip_path.unlink()
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(source_dir.rglob("*")):
            if path.is_file():
                zf.write(path, path.relative_to(source_dir).as_posix())
    return zip_path


def package_lambda(
    lambda_name: str,
    lambda_dist_dir: Path,
    package_dir: Path = PACKAGE_DIR,
) -> Optional[Path]:
    """Returns the zip path, or None when the handler was skipped or failed."""
    source = entry_module_path(lambda_name, package_dir)
    if not source.exists():
        logger.warning("%s not found, skipping %s", source, lambda_name)
        return None

    lambda_dir = lambda_dist_dir / lambda_name
    if lambda_dir.exists():
        shutil.rmtree(lambda_dir)
    lambda_dir.mkdir(parents=True)

    shutil.copyfile(source, lambda_dir / ENTRY_FILENAME)

    # Optional type stub, shipped alongside like a source map
    stub = source.with_suffix(".pyi")
    if stub.exists():
        shutil.copyfile(stub, lambda_dir / "lambda_function.pyi")

    shutil.copytree(package_dir, lambda_dir / package_dir.name, ignore=_ignore)

    zip_path = lambda_dist_dir / f"{lambda_name}.zip"
    try:
        zip_directory(lambda_dir, zip_path)
    except (OSError, zipfile.BadZipFile) as e:
        logger.error("Failed to create zip for %s: %s", lambda_name, e)
        return None

    logger.info("Created: %s", zip_path)
    return zip_path


def package_lambdas(
    dist_dir: Path,
    lambdas: Sequence[str] = LAMBDAS,
    package_dir: Path = PACKAGE_DIR,
) -> List[Path]:
    lambda_dist_dir = dist_dir / "lambdas"
    lambda_dist_dir.mkdir(parents=True, exist_ok=True)

    created = []
    for name in lambdas:
        zip_path = package_lambda(name, lambda_dist_dir, package_dir)
        if zip_path is not None:
            created.append(zip_path)

    logger.info("Lambda packaging complete!")
    return created


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Package the Lambda handlers as deployment zips")
    ap.add_argument("--dist-dir", type=Path, default=PROJECT_ROOT / "dist")
    args = ap.parse_args(argv)

    package_lambdas(args.dist_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
