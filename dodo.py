# -*- coding: utf-8 -*-
# pydoit task file
# see https://pydoit.org/
# run from this dir with `doit`, or `doit list`, `doit help` etc. (pip install doit 1st)

from doit.action import CmdAction

SOURCES = ["src/gpcli", "test", "dodo.py"]


def _build_pytest_command(test_dir, keyword="", retry=False, print_logs=False):
    cmd = ["pytest", "--color=yes", "-vv", "-x"]
    if print_logs:
        cmd.append("--capture=no")
    if retry:
        cmd.append("--lf")
    if keyword:
        cmd.extend(["-k", f'"{keyword}"'])
    cmd.append(test_dir)
    return " ".join(cmd)


def task_install():
    """Install gpcli in editable mode, with the test extra"""
    return {
        "actions": ["pip install -e .[test]"],
        "verbosity": 2,
    }


def task_test_logic():
    """Run the logic test suite (test/logic/).

    doit test_logic -k engine      # only tests matching "engine"
    doit test_logic -r -p          # rerun failures, print logs
    """

    def router(keyword, retry, print_logs):
        return _build_pytest_command(
            "test/logic/", keyword=keyword, retry=retry, print_logs=print_logs
        )

    return {
        "actions": [CmdAction(router)],
        "params": [
            {"name": "keyword", "short": "k", "default": ""},
            {"name": "retry", "short": "r", "default": False, "type": bool},
            {"name": "print_logs", "short": "p", "default": False, "type": bool},
        ],
        "verbosity": 2,
    }


def task_format():
    """Sort imports and format code with ruff."""
    actions = []
    for path in SOURCES:
        actions.append(f"ruff check --select I --fix {path}")
        actions.append(f"ruff format {path}")
    return {
        "actions": actions,
        "verbosity": 2,
    }
