# In-memory text generation providers for tests.
import asyncio


class FakeProvider:
    def __init__(self, name, response=None, error=None, delay=0.0, timeout_s=None):
        self.name = name
        self.timeout_s = timeout_s
        self.response = response
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response
