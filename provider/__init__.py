from provider.gemini import build_llm, extract_text, generate_reply

__all__ = ["build_llm", "extract_text", "generate_reply"]
