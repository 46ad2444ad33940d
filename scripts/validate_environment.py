#!/usr/bin/env python3
"""Validate local pricing service environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.domain.constraints import build_pricing_config
from backend.repository.data_repository import DEFAULT_PROPERTIES, DataRepository
from backend.services.availability_service import AvailabilityService
from backend.services.pricing_service import PricingService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="stay-pricing-env-")

    # CHECK 1: Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_names = ["fastapi", "uvicorn", "pydantic", "pandas", "httpx", "pytest"]
    import_errors: list[str] = []
    for module_name in package_names:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        validation_settings = replace(
            get_settings(),
            database_path=Path(temp_dir) / "stays_validation.db",
        )

        # CHECK 3: Pricing configuration
        try:
            config = build_pricing_config(validation_settings)
            ok, line = _print_result(
                "Pricing configuration",
                True,
                f": weights sum to {config.weights.total():.2f}",
            )
        except ValueError as exc:
            config = None
            ok, line = _print_result("Pricing configuration", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        repository = DataRepository(validation_settings)

        # CHECK 4: Database initialization
        try:
            repository.initialize_database()
            ok, line = _print_result("Database initialization", True)
        except RuntimeError as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Default catalogue seeding
        try:
            seeded = repository.seed_default_properties()
            if seeded != len(DEFAULT_PROPERTIES):
                raise RuntimeError(f"expected {len(DEFAULT_PROPERTIES)} properties, got {seeded}")
            ok, line = _print_result("Default catalogue", True, f": {seeded} properties")
        except RuntimeError as exc:
            ok, line = _print_result("Default catalogue", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 6: Sample quote and availability
        if config is not None:
            try:
                pricing_service = PricingService(
                    repository=repository,
                    settings=validation_settings,
                    config=config,
                )
                quote = pricing_service.quote_stay(
                    property_id="peachtree-407",
                    check_in=date(2025, 12, 19),
                    check_out=date(2025, 12, 21),
                    occupancy_rate=0.5,
                    reference_date=date(2025, 11, 1),
                )
                if quote.nights != 2 or quote.total <= quote.subtotal:
                    raise RuntimeError(f"unexpected quote: {quote.to_dict()}")
                availability = AvailabilityService(
                    repository=repository,
                    settings=validation_settings,
                ).check(
                    property_id="peachtree-407",
                    check_in=date(2025, 12, 19),
                    check_out=date(2025, 12, 21),
                )
                if not availability.full_available:
                    raise RuntimeError("empty calendar reported as unavailable")
                ok, line = _print_result("Sample quote", True, f": total={quote.total}")
            except Exception as exc:
                ok, line = _print_result("Sample quote", False, str(exc))
            results.append(line)
            all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Stay Pricing Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
