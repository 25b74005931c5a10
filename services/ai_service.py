"""
Language-model provider calls (Groq, OpenAI, Ollama).
"""
import json
import re

import requests
from openai import OpenAI

from utils.config_utils import is_ai_configured
from utils.errors import AIServiceError, AIServiceNotConfigured
from utils.logger import get_logger

logger = get_logger(__name__)

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"


def call_ollama(prompt, base_url, model, temperature=None, num_predict=None):
    """Call the Ollama generate API and return the response text."""
    url = f"{base_url.rstrip('/')}/api/generate"
    payload = {
        "model": model,
        "prompt": prompt,
        "stream": False
    }
    options = {}
    if temperature is not None:
        options["temperature"] = temperature
    if num_predict is not None:
        options["num_predict"] = num_predict
    if options:
        payload["options"] = options

    try:
        response = requests.post(url, json=payload, timeout=300)
    except requests.exceptions.RequestException as e:
        logger.error("Error connecting to Ollama: %s", e)
        raise AIServiceError(f"Error connecting to Ollama: {e}")

    if response.status_code != 200:
        logger.error("Ollama API error: %s - %s", response.status_code, response.text[:500])
        raise AIServiceError(f"Ollama API error: {response.status_code}")

    try:
        response_data = response.json()
        result = (response_data.get("response") or "").strip()
        # Reasoning models may leave "response" empty and answer in "thinking"
        if not result:
            result = (response_data.get("thinking") or "").strip()
    except (ValueError, AttributeError) as e:
        logger.error("Unexpected Ollama response: %s", response.text[:500])
        raise AIServiceError(f"Unexpected Ollama response: {e}")
    return result


def call_groq(prompt, api_key, model, temperature=0.7, max_tokens=1000):
    """Call Groq's OpenAI-compatible chat completions endpoint."""
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }
    payload = {
        "model": model,
        "messages": [
            {"role": "user", "content": prompt}
        ],
        "temperature": temperature,
        "max_tokens": max_tokens
    }
    try:
        response = requests.post(GROQ_CHAT_URL, json=payload, headers=headers, timeout=60)
    except requests.exceptions.RequestException as e:
        logger.error("Error connecting to Groq: %s", e)
        raise AIServiceError(f"Error connecting to Groq: {e}")

    if response.status_code != 200:
        logger.error("Groq API error: %s - %s", response.status_code, response.text[:500])
        raise AIServiceError(f"Groq API error: {response.status_code}")
    try:
        return response.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error("Unexpected Groq response: %s", response.text[:500])
        raise AIServiceError(f"Unexpected Groq response: {e!r}")


def call_openai(prompt, api_key, model, temperature=0.7, max_tokens=1000):
    """Call the OpenAI chat completions API."""
    try:
        client = OpenAI(api_key=api_key)
        completion = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except Exception as e:
        logger.error("Error connecting to OpenAI: %s", e)
        raise AIServiceError(f"Error connecting to OpenAI: {e}")
    if not completion.choices:
        raise AIServiceError("OpenAI returned no choices")
    return completion.choices[0].message.content


def generate_text(prompt, config, temperature=0.7, max_tokens=1000):
    """
    Send a single-turn prompt to the configured provider.

    Args:
        prompt (str): User prompt
        config (dict): Configuration dictionary (``ai_provider`` selects the backend)
        temperature (float): Sampling temperature
        max_tokens (int): Completion length limit

    Returns:
        str: Generated text

    Raises:
        AIServiceNotConfigured: The provider is missing its key/model
        AIServiceError: The provider call failed or returned nothing
    """
    if not is_ai_configured(config):
        raise AIServiceNotConfigured()

    provider = config.get("ai_provider", "groq")
    logger.debug("Calling %s (%d prompt chars)", provider, len(prompt))
    if provider == "openai":
        text = call_openai(prompt, config["OpenAI_API_KEY"], config["OpenAI_Model"], temperature, max_tokens)
    elif provider == "ollama":
        text = call_ollama(prompt, config["ollama_base_url"], config["ollama_model"], temperature, max_tokens)
    else:
        text = call_groq(prompt, config["groq_api_key"], config["groq_model"], temperature, max_tokens)

    if not text or not text.strip():
        raise AIServiceError("No response from AI service")
    return text.strip()


def extract_json_object(text):
    """
    Parse the first ``{...}`` block of a free-text reply.

    Raises:
        ValueError: No JSON object found, or it does not parse to a dict
    """
    match = re.search(r'\{.*\}', text or "", re.DOTALL)
    if not match:
        raise ValueError("No JSON object found in AI response")
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("AI response JSON is not an object")
    return parsed
