# -*- coding: utf-8 -*-
"""
HTTP client for the Globalping measurement API.

Two calls are used by the session engine:

1. `create_measurement`: POST /measurements. Failures are returned, not
   raised, together with a `show_help` flag that marks usage-format errors
   (HTTP 400) so the CLI knows whether to print command help.
2. `get_measurement`: GET /measurements/{id}. Responses carry an ETag; the
   client sends it back with If-None-Match and reuses the cached body on 304.
"""

from __future__ import annotations

import json
from typing import Optional

import requests
from loguru import logger

from gpcli.types import (
    APIErrorBody,
    ClientError,
    Config,
    Measurement,
    MeasurementCreate,
    MeasurementCreateResponse,
)
from gpcli.util.defaults import USER_AGENT


class GlobalpingClient:
    """Synchronous API client over a `requests.Session`.

    Parameters
    ----------
    config : Config
        Provides `api_url`, `api_token` and the request `timeout`.
    """

    def __init__(self, config: Config):
        self.api_url = config.api_url.rstrip("/")
        self.timeout = config.timeout
        self._session = requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT
        self._session.headers["Accept"] = "application/json"
        if config.api_token:
            self._session.headers["Authorization"] = f"Bearer {config.api_token}"
        self._etags: dict[str, str] = {}
        self._cache: dict[str, bytes] = {}

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ------------------------------------------------------------------------------

    def create_measurement(
        self, opts: MeasurementCreate
    ) -> tuple[Optional[MeasurementCreateResponse], bool, Optional[ClientError]]:
        """Create a measurement.

        Returns
        -------
        tuple[MeasurementCreateResponse | None, bool, ClientError | None]
            (response, show_help, error). On success error is None.
        """
        url = f"{self.api_url}/measurements"
        body = opts.to_body()
        logger.debug("*REQUEST* POST {}: {}", url, body)
        try:
            resp = self._session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error creating measurement: {}", e)
            return None, False, ClientError(f"err: {e}")

        if resp.status_code == 202:
            res = MeasurementCreateResponse.from_dict(resp.json())
            logger.debug("*RESPONSE* {}: {}", resp.status_code, res)
            return res, False, None

        err = self._parse_error(resp)
        logger.warning(
            "Create failed ({}): {} {}", resp.status_code, err.type, err.message
        )
        if resp.status_code == 400:
            msg = err.message or "invalid parameters"
            if err.params:
                msg = f"{msg}: {_format_params(err.params)}"
            return None, True, ClientError(msg, show_help=True)
        if resp.status_code == 422:
            msg = err.message or "no suitable probes found"
            return None, False, ClientError(
                f"{msg} - please try a different location"
            )
        if resp.status_code == 429:
            return None, False, ClientError(
                "rate limit exceeded - you have run out of credits for this session."
                " You can wait a moment and retry, or sign in to increase your limits"
            )
        if resp.status_code >= 500:
            return None, False, ClientError(
                "internal server error - please try again later"
            )
        return None, False, ClientError(f"unknown error response: {resp.status_code}")

    def get_measurement(self, measurement_id: str) -> Measurement:
        """Fetch the current state of a measurement.

        Raises
        ------
        ClientError
            If the request fails or the API reports an error.
        """
        return Measurement.from_dict(self.get_measurement_json(measurement_id))

    def get_measurement_json(self, measurement_id: str) -> dict:
        url = f"{self.api_url}/measurements/{measurement_id}"
        headers = {}
        if measurement_id in self._etags:
            headers["If-None-Match"] = self._etags[measurement_id]
        try:
            resp = self._session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error polling measurement {}: {}", measurement_id, e)
            raise ClientError(f"err: {e}") from e

        if resp.status_code == 304 and measurement_id in self._cache:
            logger.trace("Measurement {} not modified", measurement_id)
            return _decode(self._cache[measurement_id])
        if resp.status_code == 404:
            raise ClientError("measurement not found")
        if resp.status_code >= 500:
            raise ClientError("internal server error - please try again later")
        if resp.status_code != 200:
            raise ClientError(f"unknown error response: {resp.status_code}")

        etag = resp.headers.get("ETag")
        if etag:
            self._etags[measurement_id] = etag
            self._cache[measurement_id] = resp.content
        return _decode(resp.content)

    # ------------------------------------------------------------------------------

    @staticmethod
    def _parse_error(resp: requests.Response) -> APIErrorBody:
        try:
            data = resp.json()
        except ValueError:
            return APIErrorBody(message=resp.text)
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return APIErrorBody.from_dict(data["error"])
        return APIErrorBody()


def _decode(content: bytes) -> dict:
    try:
        return json.loads(content)
    except ValueError as e:
        raise ClientError(f"invalid response from API: {e}") from e


def _format_params(params: dict[str, str]) -> str:
    return "; ".join(str(v) for v in params.values())
