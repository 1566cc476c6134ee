"""
➡️ But : Regrouper les erreurs métier levées par les services.

Les services ne connaissent pas HTTP : ils lèvent ces exceptions,
les routers les traduisent en HTTPException (400/401/403/404/409).

🔹 Avantages :

Une seule taxonomie pour tous les services (plus de PermissionError/ConflictError redéfinis partout).

Testable sans FastAPI.
"""


class ValidationError(ValueError):
    """Entrée invalide (index hors grille, taille de grille, texte vide...)."""
    pass


class NotFoundError(LookupError):
    """Partie / secret / identifiant de joueur introuvable."""
    pass


class ConflictError(Exception):
    """Conflit métier (PIN déjà défini, partenaire déjà présent, partie terminée, template...)."""
    pass


class ForbiddenError(Exception):
    """Action réservée au propriétaire (owner ou slot)."""
    pass


class UnauthorizedError(Exception):
    """Identifiants invalides (PIN faux ou inexistant, token illisible)."""
    pass


class UpstreamError(Exception):
    """Le générateur de texte externe a échoué ou a renvoyé une réponse inexploitable."""
    pass
