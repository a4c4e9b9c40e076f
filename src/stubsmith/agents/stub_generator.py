"""Stub generator agent: asks an LLM for a stubbed module and writes it out."""

import logging
import os
from pathlib import Path
from typing import Any

from anthropic import Anthropic
import openai

from stubsmith.agents.conventions import LANGUAGE_CONVENTIONS, STRUCTURE_EXAMPLES
from stubsmith.agents.exceptions import (
    AgentCallFailedError,
    AgentError,
    AgentUnavailableError,
    GenerationError,
)
from stubsmith.models import GenerationRequest, GenerationResult, ModuleType
from stubsmith.utils.file_materializer import materialize_response

logger = logging.getLogger(__name__)

# Constants
MAX_API_TOKENS = 8192  # Max tokens for the LLM response
MAX_REQUIREMENTS_LENGTH = 4000  # Max chars of custom requirements in the prompt
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
PROVIDERS = ("anthropic", "openai")
PROVIDER_KEY_ENV = {"anthropic": "ANTHROPIC_API_KEY", "openai": "OPENAI_API_KEY"}


class StubGenerator:
    """Generates stubbed modules via the Anthropic or OpenAI API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        llm_provider: str = "auto",
        llm_fallback_provider: str | None = None,
        allow_fallback: bool = False,
        client: Any | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Model ID to use for stub generation.
            llm_provider: "auto", "anthropic" or "openai".
            llm_fallback_provider: Provider tried when the primary call fails.
            allow_fallback: Whether the fallback provider may be used.
            client: Ready-made client for the primary provider, used instead
                of building one from an API key. It is an OpenAI client when
                llm_provider is "openai", an Anthropic client otherwise.

        Raises:
            AgentUnavailableError: If there is neither an API key nor a client.
        """
        self.model: str = model
        self.api_key: str | None = (
            api_key
            or os.getenv("ANTHROPIC_API_KEY")
            or os.getenv("CLAUDE_CODE_OAUTH_TOKEN")
        )
        self.openai_api_key: str | None = os.getenv("OPENAI_API_KEY")

        self._clients: dict[str, Any] = {}
        if client is not None:
            self._clients["openai" if llm_provider == "openai" else "anthropic"] = client
        if "anthropic" not in self._clients and self.api_key:
            self._clients["anthropic"] = Anthropic(api_key=self.api_key)
        if "openai" not in self._clients and self.openai_api_key:
            self._clients["openai"] = openai.OpenAI(api_key=self.openai_api_key)

        if not self._clients:
            raise AgentUnavailableError(
                "No Anthropic or OpenAI API key found. "
                "Provide via parameter, ANTHROPIC_API_KEY, CLAUDE_CODE_OAUTH_TOKEN, "
                "or OPENAI_API_KEY env vars."
            )
        self.set_provider_config(llm_provider, llm_fallback_provider, allow_fallback)

    def set_provider_config(
        self,
        llm_provider: str = "auto",
        llm_fallback_provider: str | None = None,
        allow_fallback: bool = False,
    ) -> None:
        """Select the primary provider and the optional fallback.

        Raises:
            AgentError: If a provider name is unknown.
            AgentUnavailableError: If a selected provider has no client.
        """
        if llm_provider != "auto" and llm_provider not in PROVIDERS:
            raise AgentError(f"Unsupported provider: {llm_provider}")
        if llm_fallback_provider and llm_fallback_provider not in PROVIDERS:
            raise AgentError(f"Unsupported provider: {llm_fallback_provider}")

        self.llm_provider = llm_provider
        self.llm_fallback_provider = llm_fallback_provider or None
        self.allow_fallback = bool(allow_fallback)

        for provider in self._provider_chain():
            if provider not in self._clients:
                raise AgentUnavailableError(
                    f"No {provider} client available; set {PROVIDER_KEY_ENV[provider]}."
                )

    def _primary_provider(self) -> str:
        if self.llm_provider != "auto":
            return self.llm_provider
        return "anthropic" if "anthropic" in self._clients else "openai"

    def _resolve_model(self, provider: str) -> str:
        if provider == "openai" and self.model.startswith("claude-"):
            return DEFAULT_OPENAI_MODEL
        return self.model

    def _provider_chain(self) -> list[str]:
        chain = [self._primary_provider()]
        fallback = self.llm_fallback_provider
        if self.allow_fallback and fallback and fallback not in chain:
            chain.append(fallback)
        return chain

    @staticmethod
    def supported_languages() -> list[str]:
        return list(LANGUAGE_CONVENTIONS)

    @staticmethod
    def supported_types() -> list[str]:
        return [module_type.value for module_type in ModuleType]

    def generate_module(self, request: GenerationRequest) -> GenerationResult:
        """Generate a stubbed module and write it to disk.

        Flow:
        1. Validate the language (the module type is validated by GenerationRequest)
        2. Build the prompt from conventions and structure hints
        3. Call the LLM (primary provider, then fallback if allowed)
        4. Parse the "=== FILE: <path> ===" response, normalize paths
        5. Write files under <base_path>/src/<module_name> and detect stubs

        Args:
            request: What to generate and where.

        Returns:
            GenerationResult listing each written file and its stubs.

        Raises:
            GenerationError: If the language is unsupported.
            AgentCallFailedError: If every provider call fails.
            NoFilesProducedError: If the response contains no files.
        """
        language = request.language.lower()
        convention = LANGUAGE_CONVENTIONS.get(language)
        if convention is None:
            raise GenerationError(f"Unsupported language: {request.language}")
        module_type = request.type
        style = request.style or convention["default_style"]

        module_dir = Path(request.base_path) / "src" / request.module_name
        prompt = self._build_prompt(request, language, module_type, style)

        logger.info("Generating %s %s module '%s'", language, module_type.value, request.module_name)
        response_text = self._generate_with_llm(prompt)
        files = materialize_response(response_text, module_dir)

        return GenerationResult(
            module_name=request.module_name,
            language=language,
            type=module_type,
            style=style,
            directory=str(module_dir),
            files=files,
        )

    def _generate_with_llm(self, prompt: str) -> str:
        """Call the provider chain and return the response text.

        Raises:
            AgentCallFailedError: Wrapping the last provider error.
        """
        providers = self._provider_chain()
        last_error: Exception | None = None
        for provider in providers:
            try:
                if provider == "anthropic":
                    return self._call_anthropic(prompt)
                return self._call_openai(prompt)
            except Exception as error:
                last_error = error
                logger.warning("LLM call via %s failed: %s", provider, error)

        raise AgentCallFailedError(f"AI generation failed: {last_error}") from last_error

    def _call_anthropic(self, prompt: str) -> str:
        response = self._clients["anthropic"].messages.create(
            model=self._resolve_model("anthropic"),
            max_tokens=MAX_API_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
        return self._extract_anthropic_text(response)

    def _call_openai(self, prompt: str) -> str:
        response = self._clients["openai"].chat.completions.create(
            model=self._resolve_model("openai"),
            max_tokens=MAX_API_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.choices[0].message.content or ""

    @staticmethod
    def _extract_anthropic_text(response: Any) -> str:
        parts = [
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        ]
        return "".join(parts)

    def _build_prompt(
        self,
        request: GenerationRequest,
        language: str,
        module_type: ModuleType,
        style: str,
    ) -> str:
        """Build the stub-generation prompt.

        The output format section fixes the "=== FILE: <path> ===" protocol
        that the response parser relies on.
        """
        convention = LANGUAGE_CONVENTIONS[language]
        structure = STRUCTURE_EXAMPLES[module_type.value]
        ext = convention["file_ext"]

        requirements_line = ""
        if request.requirements:
            requirements_line = (
                f"- Additional: {request.requirements[:MAX_REQUIREMENTS_LENGTH]}\n"
            )

        tests_section = ""
        if request.with_tests:
            tests_section = (
                "\nTEST CASES (Required):\n"
                "Generate test files with stub test cases covering the happy path, "
                "edge cases and error cases of every function.\n"
            )

        return f"""Generate professional stub code for a {module_type.value} module in {language}.

MODULE: {request.module_name}
TYPE: {module_type.value}
DESCRIPTION: {structure["description"]}

REQUIREMENTS:
- Create {", ".join(structure["patterns"])}
- Include {", ".join(structure["operations"])} operations
- Must have: {", ".join(structure["includes"])}
{requirements_line}
LANGUAGE CONVENTIONS for {language}:
- File extension: {ext}
- TODO marker: {convention["todo_marker"]}
- File naming: {convention["file_naming"]}
- Function naming: {convention["function_naming"]}
- Error handling: {convention["error_handling"]}

CODING STYLE: {style}
{tests_section}
CRITICAL RULES:
1. ALL functions must be EMPTY stubs containing {convention["todo_marker"]}, where <name> is the function name
2. Include proper imports and package declarations
3. Each file should be syntactically valid but NOT implemented

OUTPUT FORMAT:
Provide ONLY the code files in this format:
