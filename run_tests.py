#!/usr/bin/env python3
"""
Simple test runner for the axiomancer combat engine.

Provides a straightforward way to run the unit tests, optionally skipping
the slower performance benchmarks.
"""

import sys
import subprocess
import argparse


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and handle errors."""
    print(f"=== {description} ===")
    print(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        print(result.stdout)
        if result.stderr:
            print("STDERR:", result.stderr)
        print(f"{description} completed successfully\n")
        return True
    except subprocess.CalledProcessError as e:
        print(f"{description} failed with exit code {e.returncode}")
        print("STDOUT:", e.stdout)
        print("STDERR:", e.stderr)
        print()
        return False


def pytest_command(target: str, verbose: bool, fast: bool) -> list[str]:
    cmd = [sys.executable, "-m", "pytest", target]
    if verbose:
        cmd.append("-v")
    if fast:
        cmd.extend(["-m", "not performance"])
    return cmd


def run_unit_tests(verbose: bool = True, fast: bool = False) -> bool:
    """Run all unit tests."""
    return run_command(pytest_command("tests/", verbose, fast), "Unit Tests")


def run_specific_test(test_file: str, verbose: bool = True) -> bool:
    """Run a specific test file anywhere under tests/."""
    cmd = [sys.executable, "-m", "pytest", "tests/", "-k", test_file.removesuffix(".py")]
    if verbose:
        cmd.append("-v")
    return run_command(cmd, f"Test: {test_file}")


def main():
    """Main test runner function."""
    parser = argparse.ArgumentParser(
        description="Simple test runner for axiomancer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py                      # Run all unit tests
  python run_tests.py --quiet              # Run tests with minimal output
  python run_tests.py --fast               # Skip performance benchmarks
  python run_tests.py --test round_resolver  # Run tests matching a file name
        """
    )

    parser.add_argument(
        "--test",
        help="Run specific test file (e.g., 'dice' for test_dice.py)"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Run with minimal output"
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Skip tests marked as performance"
    )

    args = parser.parse_args()

    verbose = not args.quiet

    if args.test:
        test_file = args.test
        if not test_file.startswith("test_"):
            test_file = f"test_{test_file}"
        success = run_specific_test(test_file, verbose)
    else:
        success = run_unit_tests(verbose, args.fast)

    if success:
        print("All operations completed successfully!")
        sys.exit(0)
    else:
        print("Some operations failed. See output above for details.")
        sys.exit(1)


if __name__ == "__main__":
    main()
