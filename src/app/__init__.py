"""App — composição do motor de navegação com infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- infra/: implementações concretas de IO (key-value stores)
- protocols/: contratos/interfaces
- observability/: contexto de logs estruturados

Padrão: app executa e conecta; fsm governa; config configura; utils apoia.
"""
