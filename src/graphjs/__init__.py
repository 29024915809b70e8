"""Python client for the GraphJS social-graph service."""

from graphjs.client import GraphJsClient as GraphJsClient
from graphjs.config import ClientConfig as ClientConfig
from graphjs.engine.session import SessionStore as SessionStore
from graphjs.errors import ApplicationFailure as ApplicationFailure
from graphjs.errors import DecodeFailure as DecodeFailure
from graphjs.errors import GraphJsError as GraphJsError
from graphjs.errors import InvalidInputError as InvalidInputError
from graphjs.errors import ServerError as ServerError
from graphjs.errors import TransportError as TransportError
from graphjs.models import FeedType as FeedType
