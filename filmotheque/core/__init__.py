"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), objets valeur et erreurs.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (MediaRecord, Category, CandidateFile)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
- value_objects/ : Objets valeur immutables (ProbedMedia, CatalogStats, ByteRange)
- errors : Taxonomie des erreurs métier
"""
