"""
Filmothèque - Catalogue local de fichiers vidéo.

Ce package fournit les fonctionnalités pour scanner des répertoires, analyser
les fichiers vidéo, les classer par catégorie et les diffuser en streaming HTTP.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (cas d'utilisation, orchestration)
- adapters/ : Couche infrastructure (CLI, ffmpeg, mediainfo, clients HTTP)
- infrastructure/ : Persistance SQLite via SQLModel
- web/ : API HTTP FastAPI
"""
