"""
Сервисы распознавания: кодек изображения, клиент Gemini, оркестратор.
"""
