"""Dependency Injector based DI Container."""

from dependency_injector import containers, providers

from exam_prep.core.config import get_config, load_llm_config

# --- Factory Functions (defined before class to avoid NameError) ---


def _create_llm():
    """Create LLM provider from the environment as it is right now."""
    from exam_prep.llm.factory import LLMFactory

    return LLMFactory.create(load_llm_config())


def _create_text_extractor():
    """Create format-aware text extractor."""
    from exam_prep.documents.extractors import OfficeTextExtractor

    return OfficeTextExtractor()


def _create_extraction_gateway(config, extractor):
    """Create upload extraction gateway."""
    from exam_prep.documents.gateway import ExtractionGateway

    return ExtractionGateway(extractor=extractor, max_file_size=config.upload.max_file_size_bytes)


def _create_chat_orchestrator(llm_factory):
    """Create chat orchestrator."""
    from exam_prep.chat.orchestrator import ChatOrchestrator

    return ChatOrchestrator(llm_factory=llm_factory)


class DIContainer(containers.DeclarativeContainer):
    """Main dependency injection container."""

    # Configuration provider
    config = providers.Singleton(get_config)

    # LLM Provider - a new instance per chat request (credentials read at request time)
    llm = providers.Factory(_create_llm)

    # Text Extractor
    text_extractor = providers.Singleton(_create_text_extractor)

    # Extraction Gateway
    extraction_gateway = providers.Factory(
        _create_extraction_gateway,
        config=config,
        extractor=text_extractor,
    )

    # Chat Orchestrator
    chat_orchestrator = providers.Factory(
        _create_chat_orchestrator,
        llm_factory=llm.provider,
    )


# Global container instance
container = DIContainer()
