"""
Couche domaine (core).

Contient les entités métier, les ports (interfaces abstraites), la validation
et les erreurs. Cette couche n'a AUCUNE dépendance vers l'infrastructure
(adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (Actor, Movie, Image) et patchs de mise à jour
- ports/ : Interfaces abstraites des repositories
- validation/ : Tables de contraintes et contrôles d'état métier
"""
