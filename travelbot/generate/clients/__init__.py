# Model client adapters (Gemini, OpenAI, Ollama, Echo).
