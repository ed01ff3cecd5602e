"""
Algogen Creature Evolution

A deterministic, headless simulation of foraging creatures steered by small
neural networks, whose appearance genes evolve through a genetic algorithm.

Architecture: CreatureSystem is the source of truth. Renderers and UI are
observers.
"""

__version__ = "0.1.0"
