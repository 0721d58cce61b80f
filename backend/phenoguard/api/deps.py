from fastapi import Request

from phenoguard.services.interpretation.interpreter import Interpreter


def get_interpreter(request: Request) -> Interpreter:
    """The Interpreter built at startup (see phenoguard.main)."""
    return request.app.state.interpreter
