"""Services Layer — async orchestration between core rules and the storage shell.

Invariants:
    - Services take their collaborators through the constructor (session, stores, clients)
    - Pure decisions (filtering, stats, validation, merge planning) stay in core/

Design Decisions:
    - One service per component: repository, categories, backups, import/export,
      credentials, remote sync
"""
