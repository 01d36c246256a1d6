"""
Modelo de usuário.

Localização: core/models/user_model.py

Schema no MongoDB (collection 'usuarios'):
{
  _id: ObjectId,
  nome: String,
  email: String (único, minúsculo),
  senha: String,          // hash bcrypt, nunca texto plano
  created_at: ISODate,
  updated_at: ISODate
}
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Emails são comparados sempre em minúsculo e sem espaços."""
    if email is None:
        return None
    return email.lower().strip()


@dataclass
class Usuario:
    """
    Usuário do sistema.

    ``id`` é None até o usuário ser salvo; depois é o ObjectId em string.
    """

    id: Optional[str] = None
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        """
        Converte para documento do MongoDB (sem _id).

        Returns:
            Dict pronto para insert/replace
        """
        now = datetime.now(timezone.utc)
        return {
            'nome': self.nome,
            'email': normalize_email(self.email),
            'senha': self.senha,
            'updated_at': now,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Usuario':
        return cls(
            id=str(doc['_id']),
            nome=doc.get('nome'),
            email=doc.get('email'),
            senha=doc.get('senha'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Representação pública (usada nas respostas da API, sem senha)."""
        return {
            'id': self.id,
            'nome': self.nome,
            'email': self.email,
        }
