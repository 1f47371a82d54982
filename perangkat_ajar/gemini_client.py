import asyncio
import logging
from google import genai

from perangkat_ajar.config import Config

logger = logging.getLogger(__name__)

# Quota (rate limit) or server overload markers worth a retry
RETRYABLE_MARKERS = ("429", "RESOURCE_EXHAUSTED", "503", "overloaded", "UNAVAILABLE")


class GeminiError(Exception):
    pass


class GeminiClient:
    def __init__(self, api_key: str = None, model: str = None, max_retries: int = None, retry_delay: float = 5):
        api_key = api_key or Config.GEMINI_API_KEY
        self.model = model or Config.GEMINI_MODEL
        self.max_retries = max_retries or Config.GEMINI_MAX_RETRIES
        self.retry_delay = retry_delay
        if not api_key:
            logger.warning("GEMINI_API_KEY not set")
            self.client = None
        else:
            self.client = genai.Client(api_key=api_key)

    async def generate_content(self, prompt: str) -> str:
        if not self.client:
            raise GeminiError("API Key Gemini belum diatur.")

        for attempt in range(self.max_retries):
            try:
                response = await self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt
                )
                return response.text
            except Exception as e:
                error_str = str(e)
                if any(marker in error_str for marker in RETRYABLE_MARKERS) and attempt < self.max_retries - 1:
                    wait_time = self.retry_delay * (attempt + 1)
                    logger.warning(f"Gemini Busy/Overloaded (Attempt {attempt+1}/{self.max_retries}). Retrying in {wait_time}s... Error: {error_str[:100]}")
                    await asyncio.sleep(wait_time)
                    continue
                raise GeminiError(f"Gagal memanggil Gemini: {error_str}") from e
        raise GeminiError("Gagal setelah beberapa percobaan (Gemini sedang sibuk).")


gemini_client = GeminiClient()
