"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan servicios y adaptadores concretos.
- Permite invertir dependencias: el orquestador depende de abstracciones.
"""
