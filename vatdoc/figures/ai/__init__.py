from vatdoc.figures.ai.ai_extractor import AiFigureExtractor
from vatdoc.figures.ai.client_base import BaseFigureClient
from vatdoc.figures.ai.factory import AiFigureExtractorFactory

__all__ = ["AiFigureExtractor", "AiFigureExtractorFactory", "BaseFigureClient"]
