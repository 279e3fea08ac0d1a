"""
Couche services applicatifs (cas d'utilisation).

Les services orchestrent la logique du domaine : probe d'un fichier,
scan concurrent d'une arborescence, import dans le catalogue, streaming
par plages d'octets, workflow de classification et affiches.

Ils dépendent des ports de core/, jamais des adaptateurs concrets.
"""
