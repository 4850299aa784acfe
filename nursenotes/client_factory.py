from typing import List, Dict
from openai import OpenAI
from .config import settings

def get_client() -> OpenAI:
    """
    USE_LOCAL_LLM=true connects to the OpenAI-compatible server at LOCAL_LLM_BASE_URL,
    otherwise the official OpenAI API is used.
    """
    if settings.USE_LOCAL_LLM:
        return OpenAI(
            base_url=settings.LOCAL_LLM_BASE_URL,
            api_key=settings.LOCAL_LLM_API_KEY,  # dummy key is accepted
        )
    else:
        return OpenAI(api_key=settings.OPENAI_API_KEY)

def chat_completion(messages: List[Dict], temperature: float | None = None, max_tokens: int | None = None, model: str | None = None):
    client = get_client()

    use_model = model or (settings.LOCAL_LLM_MODEL if settings.USE_LOCAL_LLM else settings.OPENAI_MODEL)
    use_temp = temperature if temperature is not None else (settings.LOCAL_LLM_TEMPERATURE if settings.USE_LOCAL_LLM else settings.OPENAI_TEMPERATURE)

    kwargs = {}
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    elif settings.USE_LOCAL_LLM:
        kwargs["max_tokens"] = settings.LOCAL_LLM_MAX_TOKENS

    return client.chat.completions.create(
        model=use_model,
        messages=messages,
        temperature=use_temp,
        **kwargs,
    )

def generate_markdown(system_prompt: str, user_prompt: str) -> str:
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    resp = chat_completion(messages)
    if not resp.choices:
        return ""
    return resp.choices[0].message.content or ""
