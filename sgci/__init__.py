"""
S.G.C.I. - Sistema de Gestão Comercial Imobiliária
"""
__version__ = "1.0.0"
