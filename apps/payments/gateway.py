from __future__ import annotations

import requests

from .signing import JengaConfig

TOKEN_PATH = "/authentication/api/v3/authenticate/merchant"

DEV_ACCESS_TOKEN = "TEST_ACCESS_TOKEN"


class JengaGatewayError(RuntimeError):
    pass


def fetch_access_token(config: JengaConfig) -> str:
    """
    Obtain a merchant access token from the Jenga authentication API.
    """
    if not (config.api_key and config.consumer_secret and config.merchant_code):
        if config.debug:
            # Local development without gateway credentials.
            return DEV_ACCESS_TOKEN
        raise JengaGatewayError("Jenga credentials are not configured.")

    try:
        resp = requests.post(
            f"{config.base_url.rstrip('/')}{TOKEN_PATH}",
            json={
                "merchantCode": config.merchant_code,
                "consumerSecret": config.consumer_secret,
            },
            headers={
                "Content-Type": "application/json",
                "Api-Key": config.api_key,
            },
            timeout=15,
        )
    except requests.RequestException as exc:
        raise JengaGatewayError(f"Jenga authentication request failed: {exc}") from exc

    if resp.status_code not in (200, 201):
        raise JengaGatewayError(f"Jenga authentication error: {resp.status_code} {resp.text}")

    try:
        token = (resp.json() or {}).get("accessToken")
    except ValueError as exc:
        raise JengaGatewayError("Jenga authentication returned a non-JSON body.") from exc

    if not token:
        raise JengaGatewayError("Jenga authentication response did not include an access token.")
    return token
