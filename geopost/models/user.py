from pydantic import BaseModel

# Champs optionnels : la validation du format se fait dans le routeur (400, pas 422)
class SignupRequest(BaseModel):
    username: str = ""
    password: str = ""
    age: int = 0
    gender: str = ""

class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""

class User(BaseModel):
    username: str
    password: str
    age: int = 0
    gender: str = ""
