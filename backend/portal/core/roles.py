# Tipos de principal. Un usuario y un admin nunca comparten registro.
KIND_USER = "user"
KIND_ADMIN = "admin"

# Hueco de la sesión donde vive el id de cada tipo
SESSION_SLOTS = {
    KIND_USER: "user_id",
    KIND_ADMIN: "admin_id",
}
