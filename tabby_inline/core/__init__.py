from .client import CompletionClient
from .config import EndpointConfig, TabbyInlineConfig
from .request_builder import build_request
from .session import CompletionSession, EditorBuffer
from .state import SuggestionPresenter, SuggestionState
from .types import CompletionRequest, SuggestionSet
