"""
Vertex AI REST client for LLM interactions.
"""
import json
import logging
from typing import Optional, Dict, Any, List, Sequence

import requests
import google.auth
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import VERTEX_LOCATION, MODEL_NAME, LLM_TIMEOUT, MAX_OUTPUT_TOKENS

logger = logging.getLogger("llm_client")

_ROLE_MAP = {"user": "user", "assistant": "model", "model": "model"}


class LLMClientError(RuntimeError):
    """Transport or HTTP failure talking to the completion endpoint."""


class VertexRestClient:
    """REST-based client for Vertex AI Gemini models."""

    def __init__(self,
                 project: str,
                 location: str = VERTEX_LOCATION,
                 model: str = MODEL_NAME,
                 credentials_json: Optional[str] = None,
                 timeout: int = LLM_TIMEOUT):
        self.project = project
        self.location = location
        self.model = model
        self.credentials_json = credentials_json
        self.base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
        self.model_resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
        self._token = None
        self.timeout = timeout

    def _refresh_token(self):
        """Refresh the OAuth token for API calls."""
        if self.credentials_json:
            creds = service_account.Credentials.from_service_account_file(
                self.credentials_json,
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
        else:
            creds, _ = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])

        auth_req = google.auth.transport.requests.Request()
        creds.refresh(auth_req)
        self._token = creds.token

    def _ensure_token(self):
        if not self._token:
            self._refresh_token()

    def complete(
        self,
        messages: Sequence[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        temperature: float = 0.0,
    ) -> str:
        """
        Run a chat completion and return the reply text.

        Args:
            messages: Ordered {role, content} dicts; role is user, assistant or system
            system_prompt: Instruction applied to the whole exchange
            max_tokens: Output token cap
            temperature: Sampling temperature

        Raises:
            LLMClientError: On transport failure or an error status
        """
        self._ensure_token()
        url = f"{self.base_url}/{self.model_resource}:generateContent"
        body = self.build_request_body(messages, system_prompt, max_tokens, temperature)
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

        logger.debug(f"Sending {len(body['contents'])} content block(s) to {self.model}")
        try:
            resp = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("LLM transport failure: %s", e)
            raise LLMClientError(f"Vertex REST transport failed: {e}") from e

        if resp.status_code >= 400:
            raise LLMClientError(f"Vertex REST error {resp.status_code}: {resp.text}")

        text = self._parse_response_text(resp.json())
        logger.debug("Raw LLM output: %s", repr(text))
        return text

    @staticmethod
    def build_request_body(messages: Sequence[Dict[str, str]],
                           system_prompt: Optional[str],
                           max_tokens: int,
                           temperature: float) -> Dict[str, Any]:
        """
        Translate chat messages into a generateContent body.

        System messages join the system instruction, assistant turns become the
        'model' role, and consecutive turns from the same role are merged.
        """
        system_parts: List[str] = [system_prompt] if system_prompt else []
        contents: List[Dict[str, Any]] = []

        for message in messages:
            role = str(message.get("role", "")).strip()
            content = str(message.get("content", ""))
            if role == "system":
                if content:
                    system_parts.append(content)
                continue
            if role not in _ROLE_MAP:
                raise ValueError(f"Unsupported chat role: {role!r}")
            vertex_role = _ROLE_MAP[role]
            if contents and contents[-1]["role"] == vertex_role:
                contents[-1]["parts"].append({"text": content})
            else:
                contents.append({"role": vertex_role, "parts": [{"text": content}]})

        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": float(temperature),
                "maxOutputTokens": int(max_tokens),
            },
        }
        if system_parts:
            body["systemInstruction"] = {"parts": [{"text": "\n\n".join(system_parts)}]}
        return body

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> str:
        """
        Parse response JSON to extract text content.
        Tries Vertex schema first, then falls back to alternatives.
        """
        cands = resp_json.get("candidates", [])
        if cands:
            content = cands[0].get("content", {})
            parts = content.get("parts", [])
            if parts and isinstance(parts, list):
                texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
                if texts:
                    return "".join(texts)
            if isinstance(content, dict) and isinstance(content.get("text"), str):
                return content["text"]

        if isinstance(resp_json.get("text"), str):
            return resp_json["text"]

        # Last resort: return JSON for inspection
        return json.dumps(resp_json, separators=(",", ":"))
