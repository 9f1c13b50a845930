"""
Gemini model configuration.

Priority chain: best/newest model first, most-available free tier last.
On 429 RESOURCE_EXHAUSTED or a missing model, the session manager moves to
the next model in this order. The user's preferred model only picks the
starting point; the chain itself is fixed.
"""

MODEL_LIST = [
    "gemini-2.5-pro",
    "gemini-2.5-flash",
    "gemini-2.0-flash",
]

TEMPERATURE = 0.4
MAX_OUTPUT_TOKENS = 65_536

REPORT_MAX_OUTPUT_TOKENS = 4096
