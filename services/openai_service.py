# services/openai_service.py
import openai
import os

class OpenAIService:
    def __init__(self):
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY must be set in environment variables")

        self.client = openai.AsyncOpenAI(api_key=api_key)
        self.model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        print("✅ OpenAI service initialized")

    async def parse_workout_command(self, system_prompt: str, user_content: str) -> str:
        """Send a workout command to the model and return its raw text reply.

        The reply is expected to hold a JSON object, possibly surrounded by
        prose; callers are responsible for extracting and validating it.
        """
        print(f"🔍 Sending workout command to {self.model}")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            temperature=0.3,
            max_tokens=1024
        )

        content = response.choices[0].message.content or ""
        print(f"✅ Model replied with {len(content)} characters")
        return content.strip()

# Global instance
openai_service = None

def get_openai_service() -> OpenAIService:
    """Get the global OpenAI service instance"""
    global openai_service
    if openai_service is None:
        openai_service = OpenAIService()
    return openai_service

def init_openai_service():
    """Initialize the global OpenAI service"""
    global openai_service
    openai_service = OpenAIService()
    return openai_service
