"""
Run every test module in the test folder as a script.
"""

import glob
import os
import subprocess
import sys


def run_test_module(path):
    """Run one test module; return None on success, else its output"""
    name = os.path.basename(path)
    print(f"\n{'='*50}")
    print(f"Running {name}")
    print('='*50)

    result = subprocess.run([sys.executable, path], capture_output=True, text=True)
    if result.returncode == 0:
        print(f"✓ {name} passed")
        return None

    print(f"✗ {name} failed")
    return {'returncode': result.returncode, 'stdout': result.stdout, 'stderr': result.stderr}


def main():
    test_dir = os.path.dirname(os.path.abspath(__file__))
    this_file = os.path.basename(__file__)
    test_modules = sorted(p for p in glob.glob(os.path.join(test_dir, "test_*.py"))
                          if os.path.basename(p) != this_file)

    print(f"Running {len(test_modules)} test modules...")
    failures = {}
    for path in test_modules:
        error_info = run_test_module(path)
        if error_info is not None:
            failures[os.path.basename(path)] = error_info

    print(f"\n{'='*50}")
    print("SUMMARY")
    print('='*50)
    print(f"Passed: {len(test_modules) - len(failures)}")
    print(f"Failed: {len(failures)}")

    if not failures:
        print("\n🎉 All tests passed!")
        return 0

    for name, error_info in failures.items():
        print(f"\n❌ {name} (return code {error_info['returncode']}):")
        if error_info['stderr']:
            print(error_info['stderr'])
        if error_info['stdout']:
            print(error_info['stdout'])
    return 1


if __name__ == "__main__":
    sys.exit(main())
