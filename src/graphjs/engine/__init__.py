"""Request/response engine: request building, session, dispatch, classification, decoding."""

from graphjs.engine.classifier import classify as classify
from graphjs.engine.decoder import Fallback as Fallback
from graphjs.engine.decoder import decode_result as decode_result
from graphjs.engine.request import OperationRequest as OperationRequest
from graphjs.engine.request import PreparedRequest as PreparedRequest
from graphjs.engine.request import build_request as build_request
from graphjs.engine.session import Session as Session
from graphjs.engine.session import SessionManager as SessionManager
from graphjs.engine.session import SessionStore as SessionStore
from graphjs.engine.transport import Dispatcher as Dispatcher
from graphjs.engine.transport import PendingCall as PendingCall
from graphjs.engine.transport import RawResponse as RawResponse
