"""
Domain Layer - Coeur metier de la synchronisation.

Ce module ne depend d'aucune librairie externe. Il definit:
- Les exceptions metier (ExecError, PipelineError, ...)
- L'identifiant d'artefact de dump
- L'entite Cycle et ses etats
- La politique de retry
"""
