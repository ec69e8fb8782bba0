"""Token identifiers and protocol constants."""

# Protocol labels (prefix of curve keys)
PROTOCOL_KAMINO = "Kamino"

# Token symbols
SOL = "SOL"
USDC = "USDC"
USDT = "USDT"
JITOSOL = "JitoSOL"
JUP = "JUP"

# Kamino Lend main market (Solana mainnet)
KAMINO_MAIN_MARKET = "7u3HeHxYDLhnCoErrtycNokbQYbWGzLs6JSDqGAv5PfF"

# Token mints (Solana mainnet)
TOKEN_MINTS: dict[str, str] = {
    SOL: "So11111111111111111111111111111111111111112",
    USDC: "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    USDT: "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
    JITOSOL: "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn",
    JUP: "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN",
}
