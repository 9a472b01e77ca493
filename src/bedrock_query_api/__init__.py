"""
Bedrock Query API package.

Provides:
- Bedrock Runtime client adapter (Anthropic Messages schema over httpx)
- Query handler with cold-start and token-usage telemetry
- FastAPI and AWS Lambda hosts for POST /query
"""
