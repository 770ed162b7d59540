"""
HTML response rendered from a Jinja2 template and a model.

Rendering is sandboxed and autoescaped by default. A template that fails
while rendering produces a plain-text 500 instead of aborting the response;
a template that does not compile aborts.
"""

import functools
import logging
import os
from typing import Any, Dict, Optional

from jinja2 import TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from .faults import ResponseIOFault, TemplateRenderFault
from .response import PathType, ResponseVariant, write_bytes, write_status
from .writer import Request, ResponseWriter

logger = logging.getLogger("herald.response")

HTML_MEDIA_TYPE = "text/html; charset=utf-8"


@functools.lru_cache(maxsize=None)
def _environment(autoescape: bool) -> SandboxedEnvironment:
    return SandboxedEnvironment(autoescape=autoescape)


class HTMLResponse(ResponseVariant):
    """
    Renders ``html`` against ``model`` at emission. Names missing from the
    model render as empty text.

    Example:
        page = Response(200).html("templates/hello.html", {"name": "Ada"})
        page.assign("title", "Welcome")
        page.emit(writer, request)
    """

    _html: str = ""
    _model: Optional[Dict[str, Any]] = None

    @property
    def html(self) -> str:
        return self._html

    def set_html(self, html: str) -> "HTMLResponse":
        self._html = html
        return self

    def load_html(self, path: PathType) -> "HTMLResponse":
        """
        Load the template source from a file.

        Raises:
            ResponseIOFault: the file cannot be read
        """
        filename = os.fspath(path)
        try:
            with open(filename, "r", encoding=self.config.encoding) as f:
                self._html = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ResponseIOFault("read", str(exc), path=filename) from exc
        return self

    @property
    def model(self) -> Optional[Dict[str, Any]]:
        return self._model

    def set_model(self, model: Optional[Dict[str, Any]]) -> "HTMLResponse":
        self._model = model
        return self

    def assign(self, key: str, value: Any) -> "HTMLResponse":
        if self._model is None:
            self._model = {}
        self._model[key] = value
        return self

    def render(self) -> str:
        """
        Render the template.

        Raises:
            TemplateRenderFault: FATAL when the template does not compile,
                ERROR when rendering fails
        """
        env = _environment(self.config.template_autoescape)
        try:
            template = env.from_string(self._html)
        except TemplateSyntaxError as exc:
            raise TemplateRenderFault(
                str(exc), fatal=True, metadata={"lineno": exc.lineno},
            ) from exc

        try:
            return template.render(self._model or {})
        except Exception as exc:
            raise TemplateRenderFault(
                str(exc), metadata={"error_type": type(exc).__name__},
            ) from exc

    def _emit_error(self, writer: ResponseWriter, fault: TemplateRenderFault) -> None:
        writer.headers.pop("content-length", None)
        writer.headers.set("content-type", "text/plain; charset=utf-8")
        writer.headers.set("x-content-type-options", "nosniff")
        write_status(writer, 500)
        write_bytes(writer, f"{fault.metadata['reason']}\n".encode(self.config.encoding))

    def emit(self, writer: ResponseWriter, request: Optional[Request] = None) -> None:
        """
        Render and send.

        Raises:
            TemplateRenderFault: the template does not compile
            ResponseIOFault: the writer failed
        """
        try:
            html = self.render()
        except TemplateRenderFault as fault:
            if fault.fatal:
                raise
            logger.warning("Template render failed, sending 500: %s", fault.message)
            self._emit_error(writer, fault)
            return

        self._response.set_content(html)
        if not self.has_header("content-type"):
            self.set_header("content-type", HTML_MEDIA_TYPE)
        self._response.emit(writer, request)
