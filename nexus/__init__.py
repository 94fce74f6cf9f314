"""Nexus: relay de cobranças PIX entre a loja e o gateway AmploPay."""
