"""Service configuration constants: single source of truth for all env vars."""

import os

# Server binding, used by entrypoint / uvicorn
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "3000"))

# Frontend origin for OAuth redirects and CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Figma OAuth application
FIGMA_CLIENT_ID = os.getenv("FIGMA_CLIENT_ID", "")
FIGMA_CLIENT_SECRET = os.getenv("FIGMA_CLIENT_SECRET", "")
FIGMA_REDIRECT_URI = os.getenv(
    "FIGMA_REDIRECT_URI", "http://localhost:3000/auth/figma/callback"
)
FIGMA_SCOPE = os.getenv("FIGMA_SCOPE", "file_content:read current_user:read")
FIGMA_AUTHORIZATION_URL = "https://www.figma.com/oauth"
FIGMA_TOKEN_URL = "https://api.figma.com/v1/oauth/token"

# Figma REST API
FIGMA_API_BASE = os.getenv("FIGMA_API_BASE", "https://api.figma.com/v1")

# LLM provider: "openai" or "gemini"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Cached Figma JSON and generated HTML
OUTPUT_DIR = os.getenv("OUTPUT_DIR", os.path.join(os.getcwd(), "output"))
