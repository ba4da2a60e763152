"""Quick health check of the supplier engine against the configured dataset."""

import asyncio
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))


def check_component(name, func):
    """Run one check and report its status."""
    try:
        func()
        print(f"✓ {name}")
        return True
    except Exception as e:
        print(f"✗ {name}: {str(e)[:80]}")
        return False


def check_files():
    from supplier_rag import config

    settings = config.load_config()
    assert config.CONFIG_PATH.exists(), f"Missing {config.CONFIG_PATH}"
    if settings["provider"]["kind"] == "csv":
        dataset = config.resolve_path(settings["provider"]["csv_path"])
        assert dataset.exists(), f"Missing {dataset}"


def check_dataset():
    from supplier_rag.engine import build_engine

    records = asyncio.run(build_engine().records())
    assert records, "Supplier dataset is empty"


def check_scoring():
    from supplier_rag.engine import build_engine

    best = asyncio.run(build_engine().get_best("overall"))
    assert best.name


def check_api():
    from fastapi.testclient import TestClient

    from api.app import app

    assert TestClient(app).get("/health").json() == {"status": "ok"}


def main():
    print("\n" + "=" * 60)
    print("SUPPLIER ENGINE HEALTH CHECK")
    print("=" * 60 + "\n")

    checks = [
        ("Required Files", check_files),
        ("Supplier Dataset", check_dataset),
        ("Scoring", check_scoring),
        ("API", check_api),
    ]

    results = [check_component(name, func) for name, func in checks]

    print("\n" + "=" * 60)
    passed = sum(results)
    total = len(results)
    print(f"RESULT: {passed}/{total} components healthy")
    print("=" * 60 + "\n")

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
