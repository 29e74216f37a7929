# -*- coding: utf-8 -*-
"""
Loguru sink setup for the command-line client.

The CLI writes its user-facing output with click/rich, so by default no log
sinks are attached at all. `start_client_log` adds a file and/or stderr sink on
request (see the `--log-*` options of `gpcli`).
"""

import os
import pathlib
import sys
import traceback

from loguru import logger

from .defaults import DEFAULT_LOGLEVEL, SINGLE_LINE_ERR_LOG


def format_error_response():
    err_str = traceback.format_exc()
    if SINGLE_LINE_ERR_LOG:
        return "\t".join(line.strip() for line in err_str.splitlines())
    else:
        return err_str


def start_client_log(
    log_to_file=False,
    log_to_stdout=False,
    log_path=None,
    clear_prev=True,
    log_level=DEFAULT_LOGLEVEL,
):
    if log_path is None or log_path == "":
        log_path = log_default_path_client()
    else:
        log_path = os.path.abspath(log_path)

    if clear_prev and log_to_file:
        clear_log(log_path)

    # first remove (default) stderr output
    logger.remove()

    if log_to_file:
        logger.add(log_path, level=log_level, colorize=False)
    if log_to_stdout:
        logger.add(sys.stderr, level=log_level, colorize=True)
    if log_to_file:
        logger.info("Client log started at {}", log_path)
    else:
        logger.debug("Client log started.")


def log_default_path_client() -> str:
    return str(pathlib.Path.home().joinpath(".gpcli/client.log"))


def clear_log(log_path: str):
    """
    Clear the logger file at the given path.

    Arguments
    ---------
    log_path : str
        The path to the logger file. Can get the default path with
        log_default_path_client().
    """
    if os.path.exists(log_path):
        try:
            os.remove(log_path)
        except PermissionError:
            logger.error(
                f"Could not clear log file {log_path}. Permission denied. Continuing."
            )


def shutdown_client_log():
    try:
        logger.info("Closing down client log.")
        logger.remove()
    except Exception:
        logger.exception("Error shutting down client log - skipping.")

