"""httpx auth that signs Bedrock Runtime requests with AWS SigV4."""
from __future__ import annotations
from typing import Generator

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials, ReadOnlyCredentials
from botocore.session import get_session

from bedrock_query_api.common.errors import InferenceCallError

SIGNING_NAME = "bedrock"

def _default_credentials() -> Credentials | None:
    """Resolve credentials through botocore's default chain (env, profile, Lambda role)."""
    return get_session().get_credentials()

class BedrockSigV4Auth(httpx.Auth):
    """Signs every request; refreshable role credentials are re-read per call."""

    requires_request_body = True

    def __init__(self, region: str, credentials: Credentials | None = None) -> None:
        self.region = region
        self._credentials = credentials

    def _frozen(self) -> ReadOnlyCredentials:
        if self._credentials is None:
            self._credentials = _default_credentials()
        if self._credentials is None:
            raise InferenceCallError("No AWS credentials found to sign the Bedrock request")
        return self._credentials.get_frozen_credentials()

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        aws_request = AWSRequest(
            method=request.method,
            url=str(request.url),
            data=request.content,
            headers={"Content-Type": request.headers.get("content-type", "application/json")},
        )
        SigV4Auth(self._frozen(), SIGNING_NAME, self.region).add_auth(aws_request)
        for name, value in aws_request.headers.items():
            request.headers[name] = value
        yield request
