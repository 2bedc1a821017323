"""
Comparison UI Router - Browser page for comparing model answers side by side.

This module serves a single self-contained page that:
- Lets the user pick which models to query (all selected by default)
- Sends the prompt to POST /models/query
- Shows one card per model with loading, error and answer states
- Shows token usage (used / remaining) for each model

Usage:
======
1. Open http://localhost:3000/ in a browser
2. Pick models, type a prompt, press "Compare"

The page is available in English and Portuguese. The language comes from
``?lang=`` first, then the Accept-Language header, then Portuguese.
"""

import json
import logging
from html import escape
from typing import Dict, Optional

from fastapi import APIRouter, Header, Query
from fastapi.responses import HTMLResponse

from app.ai.providers import ProviderType


logger = logging.getLogger("fanout.ui")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(tags=["ui"])


# ---------------------------------------------------------------------------
# TRANSLATIONS
# ---------------------------------------------------------------------------
DEFAULT_LANGUAGE = "pt"
PROMPT_MAX_LENGTH = 800

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "badge": "Multi-model playground",
        "title": "Compare AI answers side by side",
        "description": "Send one prompt to OpenAI, Gemini and Claude at the same time and compare what each model says.",
        "promptLabel": "Your prompt",
        "promptPlaceholder": "Ask anything, for example: explain the OSI model in simple terms.",
        "submit": "Compare",
        "submitLoading": "Asking the models...",
        "reset": "Clear",
        "tokensLabel": "Tokens:",
        "tokensLoading": "counting...",
        "generating": "Generating answer...",
        "notSelected": "Model not selected for this query.",
        "promptRequired": "Type a prompt before submitting.",
        "modelRequired": "Select at least one model.",
        "unsupportedModels": "Unsupported models:",
        "unknownModelError": "Unknown error while querying the model.",
        "requestFailed": "Could not reach the server",
        "openaiLabel": "OpenAI",
        "openaiHelper": "GPT chat completions",
        "geminiLabel": "Google Gemini",
        "geminiHelper": "Gemini generate content",
        "claudeLabel": "Anthropic Claude",
        "claudeHelper": "Claude messages",
        "language": "Language",
        "footer": "Answers come straight from third-party providers and may be inaccurate.",
    },
    "pt": {
        "badge": "Playground multimodelo",
        "title": "Compare respostas de IA lado a lado",
        "description": "Envie um prompt para OpenAI, Gemini e Claude ao mesmo tempo e compare o que cada modelo responde.",
        "promptLabel": "Seu prompt",
        "promptPlaceholder": "Pergunte qualquer coisa, por exemplo: explique o modelo OSI de forma simples.",
        "submit": "Comparar",
        "submitLoading": "Consultando os modelos...",
        "reset": "Limpar",
        "tokensLabel": "Tokens:",
        "tokensLoading": "contando...",
        "generating": "Gerando resposta...",
        "notSelected": "Modelo não selecionado para esta consulta.",
        "promptRequired": "Digite um prompt antes de enviar.",
        "modelRequired": "Selecione pelo menos um modelo.",
        "unsupportedModels": "Modelos não suportados:",
        "unknownModelError": "Erro desconhecido ao consultar o modelo.",
        "requestFailed": "Erro ao consultar o backend",
        "openaiLabel": "OpenAI",
        "openaiHelper": "Chat completions do GPT",
        "geminiLabel": "Google Gemini",
        "geminiHelper": "Generate content do Gemini",
        "claudeLabel": "Anthropic Claude",
        "claudeHelper": "Messages do Claude",
        "language": "Idioma",
        "footer": "As respostas vêm diretamente de provedores terceiros e podem conter imprecisões.",
    },
}

NUMBER_LOCALES = {"en": "en-US", "pt": "pt-BR"}


def resolve_language(lang: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    """
    Pick the page language.

    An explicit ``lang`` wins; otherwise the first supported entry of the
    Accept-Language header (in the order the browser sent them); otherwise
    DEFAULT_LANGUAGE.
    """
    if lang:
        code = lang.strip().lower()[:2]
        if code in TRANSLATIONS:
            return code

    if accept_language:
        for entry in accept_language.split(","):
            code = entry.split(";")[0].strip().lower()[:2]
            if code in TRANSLATIONS:
                return code

    return DEFAULT_LANGUAGE


# ---------------------------------------------------------------------------
# PAGE HTML
# ---------------------------------------------------------------------------

def get_compare_html(language: str) -> str:
    """
    Generate the comparison page for the given language.

    Strings shown by the script are passed as JSON; strings in the static
    markup are HTML-escaped.
    """
    t = TRANSLATIONS[language]
    strings_json = json.dumps(t)
    models_json = json.dumps(ProviderType.values())
    number_locale = NUMBER_LOCALES[language]

    def text(key: str) -> str:
        return escape(t[key])

    return f"""<!DOCTYPE html>
<html lang="{language}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{text("title")}</title>
    <style>
        * {{
            box-sizing: border-box;
        }}

        body {{
            margin: 0;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: linear-gradient(160deg, #f4f8fb 0%, #dbe9f4 100%);
            color: #0f172a;
            min-height: 100vh;
        }}

        main {{
            max-width: 1100px;
            margin: 0 auto;
            padding: 48px 16px;
            display: flex;
            flex-direction: column;
            gap: 32px;
        }}

        header {{
            text-align: center;
        }}

        .badge {{
            display: inline-block;
            padding: 4px 12px;
            border-radius: 999px;
            background: rgba(255, 255, 255, 0.6);
            font-size: 12px;
            font-weight: 600;
            text-transform: uppercase;
        }}

        .panel {{
            background: rgba(255, 255, 255, 0.7);
            border: 1px solid rgba(255, 255, 255, 0.8);
            border-radius: 20px;
            padding: 24px;
        }}

        .grid {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(260px, 1fr));
            gap: 16px;
        }}

        .toggle {{
            width: 100%;
            text-align: left;
            padding: 12px 16px;
            border-radius: 12px;
            border: 1px solid #cbd5e1;
            background: rgba(255, 255, 255, 0.6);
            cursor: pointer;
            opacity: 0.8;
        }}

        .toggle.active {{
            border-color: #4a90c2;
            box-shadow: 0 0 0 2px #4a90c2;
            opacity: 1;
        }}

        .tokens {{
            font-size: 12px;
            color: #475569;
        }}

        .tokens .used {{
            color: #dc2626;
            font-weight: 600;
        }}

        .tokens .remaining {{
            color: #2563eb;
            font-weight: 600;
        }}

        textarea {{
            width: 100%;
            height: 140px;
            padding: 16px;
            border-radius: 16px;
            border: 1px solid #cbd5e1;
            font: inherit;
        }}

        .counter {{
            text-align: right;
            font-size: 12px;
            color: #64748b;
        }}

        .error {{
            color: #dc2626;
            font-weight: 500;
        }}

        button.primary {{
            padding: 8px 24px;
            border-radius: 999px;
            border: none;
            background: #0f172a;
            color: #ffffff;
            font-weight: 600;
            cursor: pointer;
        }}

        button.primary:disabled {{
            background: #64748b;
            cursor: not-allowed;
        }}

        button.secondary {{
            padding: 8px 20px;
            border-radius: 999px;
            border: 1px solid rgba(15, 23, 42, 0.3);
            background: transparent;
            font-weight: 600;
            cursor: pointer;
        }}

        .card {{
            display: flex;
            flex-direction: column;
            gap: 12px;
        }}

        .card.inactive {{
            opacity: 0.7;
        }}

        .card .body {{
            flex: 1;
            padding: 16px;
            border-radius: 12px;
            background: rgba(255, 255, 255, 0.6);
            white-space: pre-wrap;
            font-size: 14px;
            line-height: 1.5;
        }}

        .muted {{
            color: #64748b;
        }}

        footer {{
            text-align: center;
            font-size: 12px;
            color: #475569;
        }}
    </style>
</head>
<body>
    <main>
        <header>
            <span class="badge">{text("badge")}</span>
            <h1>{text("title")}</h1>
            <p>{text("description")}</p>
            <nav aria-label="{text("language")}">
                <a href="?lang=pt">PT</a> | <a href="?lang=en">EN</a>
            </nav>
        </header>

        <section class="panel">
            <form id="compare-form">
                <div class="grid" id="toggles"></div>

                <p>
                    <label for="prompt"><strong>{text("promptLabel")}</strong></label>
                </p>
                <textarea id="prompt" maxlength="{PROMPT_MAX_LENGTH}" placeholder="{text("promptPlaceholder")}"></textarea>
                <div class="counter"><span id="counter">0</span>/{PROMPT_MAX_LENGTH}</div>
                <p class="error" id="global-error" hidden></p>

                <p>
                    <button type="submit" class="primary" id="submit">{text("submit")}</button>
                    <button type="button" class="secondary" id="reset">{text("reset")}</button>
                </p>
            </form>
        </section>

        <section class="grid" id="cards"></section>

        <footer>{text("footer")}</footer>
    </main>

    <script>
        const T = {strings_json};
        const MODELS = {models_json};
        const numberFormat = new Intl.NumberFormat("{number_locale}");

        const selected = new Set(MODELS);
        let responses = {{}};
        let submitting = false;

        const form = document.getElementById("compare-form");
        const promptInput = document.getElementById("prompt");
        const counter = document.getElementById("counter");
        const globalError = document.getElementById("global-error");
        const submitButton = document.getElementById("submit");

        function resetResponses() {{
            responses = {{}};
            MODELS.forEach((model) => {{
                responses[model] = {{ loading: false }};
            }});
        }}

        function formatTokens(value) {{
            return typeof value === "number" ? numberFormat.format(value) : null;
        }}

        function showGlobalError(message) {{
            globalError.textContent = message || "";
            globalError.hidden = !message;
        }}

        function describeServerError(detail, status) {{
            if (detail === "PROMPT_REQUIRED") return T.promptRequired;
            if (detail === "MODEL_SELECTION_REQUIRED") return T.modelRequired;
            if (typeof detail === "string" && detail.startsWith("UNSUPPORTED_MODELS:")) {{
                return T.unsupportedModels + " " + detail.split(":")[1];
            }}
            if (typeof detail === "string" && detail) return detail;
            return T.requestFailed + " (" + status + ").";
        }}

        function renderToggles() {{
            const container = document.getElementById("toggles");
            container.innerHTML = "";
            MODELS.forEach((model) => {{
                const response = responses[model];
                const wrapper = document.createElement("div");

                const button = document.createElement("button");
                button.type = "button";
                button.className = "toggle" + (selected.has(model) ? " active" : "");
                button.setAttribute("aria-pressed", selected.has(model) ? "true" : "false");
                const label = document.createElement("strong");
                label.textContent = T[model + "Label"];
                const helper = document.createElement("div");
                helper.className = "muted";
                helper.textContent = T[model + "Helper"];
                button.append(label, helper);
                button.addEventListener("click", () => {{
                    if (selected.has(model)) {{
                        selected.delete(model);
                    }} else {{
                        selected.add(model);
                    }}
                    render();
                }});

                const tokens = document.createElement("p");
                tokens.className = "tokens";
                const used = document.createElement("span");
                used.className = "used";
                if (response.loading) {{
                    used.textContent = T.tokensLoading;
                }} else {{
                    used.textContent = formatTokens(response.tokensUsed) || "-";
                }}
                tokens.append(T.tokensLabel + " ", used);
                const remaining = response.loading ? null : formatTokens(response.tokensRemaining);
                if (remaining) {{
                    const rest = document.createElement("span");
                    rest.className = "remaining";
                    rest.textContent = remaining;
                    tokens.append(" / ", rest);
                }}

                wrapper.append(button, tokens);
                container.append(wrapper);
            }});
        }}

        function renderCards() {{
            const container = document.getElementById("cards");
            container.innerHTML = "";
            MODELS.forEach((model) => {{
                const response = responses[model];
                const active = selected.has(model);

                const card = document.createElement("article");
                card.className = "panel card" + (active ? "" : " inactive");

                const title = document.createElement("h3");
                title.textContent = T[model + "Label"];
                const body = document.createElement("div");
                body.className = "body";

                if (response.loading) {{
                    body.classList.add("muted");
                    body.textContent = T.generating;
                }} else if (response.error) {{
                    body.classList.add("error");
                    body.textContent = response.error;
                }} else if (response.text) {{
                    body.textContent = response.text;
                }} else if (!active) {{
                    body.classList.add("muted");
                    body.textContent = T.notSelected;
                }}

                card.append(title, body);
                container.append(card);
            }});
        }}

        function render() {{
            renderToggles();
            renderCards();
            counter.textContent = String(promptInput.value.length);
            submitButton.disabled = submitting;
            submitButton.textContent = submitting ? T.submitLoading : T.submit;
        }}

        form.addEventListener("submit", async (event) => {{
            event.preventDefault();
            const prompt = promptInput.value.trim();
            const models = MODELS.filter((model) => selected.has(model));
            showGlobalError(null);

            if (!prompt) {{
                showGlobalError(T.promptRequired);
                return;
            }}
            if (models.length === 0) {{
                showGlobalError(T.modelRequired);
                return;
            }}

            models.forEach((model) => {{
                responses[model] = {{ loading: true }};
            }});
            submitting = true;
            render();

            try {{
                const reply = await fetch("/models/query", {{
                    method: "POST",
                    headers: {{ "Content-Type": "application/json" }},
                    body: JSON.stringify({{ prompt, models }}),
                }});
                const data = await reply.json().catch(() => null);
                if (!reply.ok) {{
                    throw new Error(describeServerError(data && data.detail, reply.status));
                }}
                models.forEach((model) => {{
                    const result = data.results.find((item) => item.id === model);
                    responses[model] = {{
                        loading: false,
                        text: result ? result.text : undefined,
                        error: result ? result.error : T.unknownModelError,
                        tokensUsed: result ? result.tokensUsed : undefined,
                        tokensRemaining: result ? result.tokensRemaining : undefined,
                    }};
                }});
            }} catch (error) {{
                const message = error instanceof Error ? error.message : T.unknownModelError;
                showGlobalError(message);
                models.forEach((model) => {{
                    responses[model] = {{ loading: false, error: message }};
                }});
            }} finally {{
                submitting = false;
                render();
            }}
        }});

        document.getElementById("reset").addEventListener("click", () => {{
            promptInput.value = "";
            showGlobalError(null);
            resetResponses();
            render();
        }});

        promptInput.addEventListener("input", () => {{
            counter.textContent = String(promptInput.value.length);
        }});

        resetResponses();
        render();
    </script>
</body>
</html>"""


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.get("/", response_class=HTMLResponse)
async def compare_page(
    lang: Optional[str] = Query(default=None, description="Page language: en or pt"),
    accept_language: Optional[str] = Header(default=None),
):
    """Serve the side-by-side comparison page."""
    language = resolve_language(lang, accept_language)
    logger.debug(f"Serving comparison page in {language}")
    return HTMLResponse(content=get_compare_html(language))
