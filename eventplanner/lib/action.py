import logging

import openai
from openai import OpenAI
from ollama import chat
from ollama import ChatResponse
from ollama import ResponseError

from eventplanner.lib.config import load_settings
from eventplanner.lib.exceptions import ConfigurationError, PlannerError, TransportError


class Action:
    def __init__(self, model=None):
        self.settings = load_settings()
        self.model = model
        self.system_prompt = None
        self.limit_characters_prompt = 50000
        self.models = {
            'gpt-4.1-mini': {'platform': 'OpenAI'},
            'gpt-4.1': {'platform': 'OpenAI'},
            'gpt-4o': {'platform': 'OpenAI'},
            'gpt-4o-mini': {'platform': 'OpenAI'},
            'gpt-3.5-turbo': {'platform': 'OpenAI'},
            'o4-mini': {'platform': 'OpenAI'},
            'llama3': {'platform': 'Ollama'},
            'llama3.2': {'platform': 'Ollama'},
            'llama3.2:latest': {'platform': 'Ollama'},
            'phi4': {'platform': 'Ollama'},
            'dummy': {'platform': 'Dummy'}
        }

    def set_limit_characters_prompt(self, limit_characters_prompt):
        """
        Initializes the limit_characters_prompt.
        """
        self.limit_characters_prompt = limit_characters_prompt

    def set_model(self, model):
        """
        Initializes the model.
        """
        self.model = model

    def set_system_prompt(self, system_prompt):
        """
        Initializes the system prompt.
        """
        self.system_prompt = system_prompt

    def _messages(self, prompt: str) -> list:
        messages = []
        if self.system_prompt:
            messages.append({
                "role": "system",
                "content": self.system_prompt,
            })
        messages.append({
            "role": "user",
            "content": prompt,
        })
        return messages

    def prompt(self, prompt: str, schema: dict = None) -> str:
        """
        Sends the prompt to the configured model and returns the raw reply text.

        Raises:
            PlannerError: the prompt exceeds the character limit.
            ConfigurationError: the model is not registered.
            TransportError: the provider call failed.
        """
        if len(prompt) > self.limit_characters_prompt:
            raise PlannerError(f"Limit Prompt Error ({self.limit_characters_prompt}): prompt has {len(prompt)} characters")

        if self.model not in self.models:
            raise ConfigurationError(f"Model not found: {self.model}")

        platform = self.models[self.model]['platform']
        logging.info(f"Prompt model|{self.model}|{platform}:{prompt}")

        if platform == 'OpenAI':
            response = self.promptOpenAI(prompt, schema=schema)
        elif platform == 'Ollama':
            response = self.promptOllama(prompt)
        elif platform == 'Dummy':
            response = self.promptDummy(prompt)
        else:
            raise ConfigurationError(f"Platform not found: {platform}")

        logging.info(f"Response model|{self.model}|{platform}:{response}")
        return response

    def promptOpenAI(self, prompt: str, schema: dict = None) -> str:
        if not self.settings.api_key:
            raise ConfigurationError("OpenAI API key not found. Set OPENAI_API_KEY in the environment or a .env file.")

        client = OpenAI(api_key=self.settings.api_key, base_url=self.settings.base_url, timeout=self.settings.timeout)
        request = {
            "model": self.model,
            "messages": self._messages(prompt),
            "temperature": 0.7,
            "max_tokens": 4000,
        }

        if schema is not None:
            # Name belongs at the json_schema level, not inside the schema
            schema_name = schema.get("name", "default_schema")
            schema = {k: v for k, v in schema.items() if k != "name"}
            request["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "schema": schema
                }
            }

        try:
            completion = client.chat.completions.create(**request)
        except openai.APIStatusError as e:
            logging.error(f"Error from OpenAI API: {e.response.text}")
            raise TransportError(e.status_code, e.response.text) from e
        except openai.APIConnectionError as e:
            logging.error(f"Error calling OpenAI API: {e}")
            raise TransportError(None, str(e)) from e

        return completion.choices[0].message.content or ""

    def promptOllama(self, prompt: str) -> str:
        try:
            response: ChatResponse = chat(model=self.model, messages=self._messages(prompt))
        except ResponseError as e:
            raise TransportError(e.status_code, e.error) from e
        except ConnectionError as e:
            raise TransportError(None, str(e)) from e
        return response.message.content

    def promptDummy(self, prompt: str) -> str:
        return prompt
