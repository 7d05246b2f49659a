"""
Client for the external language model that reads lab reports and checks
medication/supplement interactions.

Both operations are best-effort: each runs a Prompt -> LLM -> Parser chain
whose parser validates the answer against a pydantic model, and every failure
along the way is turned into a result object with ``error`` set. Callers never
see a raw exception.
"""

import logging
from typing import Any, List, Optional, Sequence

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import Runnable
from langchain_groq import ChatGroq

from health_tracker.core.config import settings
from health_tracker.llm_schemas import (
    ExtractedData,
    InteractionCheckResult,
    InteractionReport,
    LabExtraction,
    PillRef,
)
from health_tracker.prompts import prompts

logger = logging.getLogger(__name__)


def _format_pill_list(pills: Sequence[PillRef]) -> str:
    return "\n".join(f"- {pill.name} (ID: {pill.id})" for pill in pills)


class HealthAIClient:
    """
    Wraps the Groq chat model behind two structured-output chains.

    This class is implemented as a Singleton so the model client is created
    once per process. A pre-built chat model (any LangChain runnable) can be
    passed in instead, which bypasses the singleton (used by tests).
    """
    _instance = None

    def __new__(cls, llm=None):
        if llm is not None:
            return super(HealthAIClient, cls).__new__(cls)
        if cls._instance is None:
            cls._instance = super(HealthAIClient, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, llm=None):
        if llm is None and self._initialized:
            return

        self.llm: Optional[Runnable] = llm
        if self.llm is None:
            if settings.GROQ_API_KEY:
                try:
                    self.llm = ChatGroq(
                        temperature=settings.TEMPERATURE,
                        groq_api_key=settings.GROQ_API_KEY,
                        model_name=settings.LLM_MODEL_NAME,
                        base_url=settings.GROQ_BASE_URL,
                    )
                except Exception as e:
                    logger.error(f"Error initializing Groq chat model: {e}")
            else:
                logger.warning("GROQ_API_KEY is not set; AI extraction and interaction checks are disabled.")

        self.lab_chain = self._create_chain(
            prompts.LAB_EXTRACTION_PROMPT_TEMPLATE, ["lab_text"], LabExtraction
        )
        self.interaction_chain = self._create_chain(
            prompts.INTERACTION_CHECK_PROMPT_TEMPLATE, ["medication_list", "supplement_list"], InteractionReport
        )
        self._initialized = True

    def _create_chain(self, prompt_template: str, input_variables: List[str], pydantic_object: Any) -> Optional[Runnable]:
        """Builds Prompt -> LLM -> Parser, or None when no model is configured."""
        if self.llm is None:
            return None
        parser = PydanticOutputParser(pydantic_object=pydantic_object)
        prompt = PromptTemplate(
            template=prompt_template,
            input_variables=input_variables,
            partial_variables={"format_instructions": parser.get_format_instructions()},
        )
        return prompt | self.llm | parser

    def extract_lab_data(self, text: str) -> ExtractedData:
        """
        Extracts health markers and recommendations from lab report text.

        Args:
            text (str): The raw text of the lab report.

        Returns:
            ExtractedData: The markers and recommendations, or empty lists
            with ``error`` set when the model could not be used or its
            answer could not be understood.
        """
        if self.lab_chain is None:
            return ExtractedData(error="AI client is not configured.")

        try:
            extraction: LabExtraction = self.lab_chain.invoke({"lab_text": text})
        except OutputParserException as e:
            logger.error(f"Could not parse lab extraction response: {e}")
            return ExtractedData(error=f"Unparseable AI response: {e}")
        except Exception as e:
            logger.error(f"An error occurred with the Groq API during lab extraction: {e}")
            return ExtractedData(error=f"AI request failed: {e}")

        logger.info(
            f"Extracted {len(extraction.markers)} markers and {len(extraction.recommendations)} recommendations."
        )
        return ExtractedData(markers=extraction.markers, recommendations=extraction.recommendations)

    def check_interactions(
            self,
            medications: List[PillRef],
            supplements: List[PillRef],
    ) -> InteractionCheckResult:
        """
        Asks the model for pairwise medication/supplement interactions.

        An empty medication or supplement list short-circuits to an empty,
        successful result without calling the model.
        """
        if not medications or not supplements:
            return InteractionCheckResult()
        if self.interaction_chain is None:
            return InteractionCheckResult(error="AI client is not configured.")

        try:
            report: InteractionReport = self.interaction_chain.invoke({
                "medication_list": _format_pill_list(medications),
                "supplement_list": _format_pill_list(supplements),
            })
        except OutputParserException as e:
            logger.error(f"Could not parse interaction check response: {e}")
            return InteractionCheckResult(error=f"Unparseable AI response: {e}")
        except Exception as e:
            logger.error(f"An error occurred with the Groq API during interaction check: {e}")
            return InteractionCheckResult(error=f"AI request failed: {e}")

        return InteractionCheckResult(interactions=report.interactions)


def get_ai_client() -> HealthAIClient:
    """FastAPI dependency returning the shared AI client."""
    return HealthAIClient()
