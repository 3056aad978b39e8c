"""
Core модуль NetBox Infra Check: модели, домен сверки, конфигурация,
логирование и исключения.
"""
