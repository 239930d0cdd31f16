"""Built-in vendor presets and first-run defaults."""

CONFIG_VERSION = "1.0.0"

DEFAULT_VENDOR = "anthropic"
DEFAULT_MODEL = "Claude"

# Vendor presets written by `modix init` / `modix config reset`.
PRESET_VENDORS = {
    "anthropic": {
        "company": "Anthropic",
        "models": ["Claude"],
    },
    "deepseek": {
        "company": "DeepSeek",
        "api_endpoint": "https://api.deepseek.com/v1",
        "models": ["deepseek-reasoner", "deepseek-chat"],
    },
    "bailian": {
        "company": "Alibaba",
        "api_endpoint": "https://dashscope.aliyuncs.com/compatible-mode/v1",
        "models": ["qwen3-coder-plus", "qwen3-coder-flash"],
    },
    "volcengine": {
        "company": "ByteDance",
        "api_endpoint": "https://ark.cn-beijing.volces.com/api/coding",
        "models": ["doubao-seed-code-preview-latest"],
    },
    "moonshot": {
        "company": "Moonshot AI",
        "api_endpoint": "https://api.moonshot.cn/anthropic",
        "models": ["kimi-k2-thinking-turbo"],
    },
    "streamlake": {
        "company": "Kuaishou",
        "api_endpoint": "https://wanqing.streamlakeapi.com/api/gateway/v1/endpoints/ep-xxx-xxx/claude-code-proxy",
        "models": ["KAT-Coder"],
    },
    "minimax": {
        "company": "MiniMax",
        "api_endpoint": "https://api.minimaxi.com/anthropic",
        "models": ["MiniMax-M2"],
    },
    "bigmodel": {
        "company": "ZHIPU AI",
        "api_endpoint": "https://open.bigmodel.cn/api/anthropic",
        "models": ["GLM-4.6"],
    },
    "xiaomi": {
        "company": "Xiaomi",
        "api_endpoint": "https://api.xiaomimimo.com/anthropic",
        "models": ["mimo-v2-flash"],
    },
}

# Values written into the assistant's `env` block for non-Anthropic backends.
API_TIMEOUT_MS = "3000000"
DISABLE_NONESSENTIAL_TRAFFIC = 1

WELCOME_ANNOUNCEMENT = "Welcome to Claude code, the configuration managed by modix."
