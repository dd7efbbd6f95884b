"""ISO 4217 currency table: numeric code and minor-unit exponent per code."""

from typing import NamedTuple


class Currency(NamedTuple):
    numeric: str
    exponent: int


CURRENCIES = {
    "AED": Currency("784", 2),
    "AFN": Currency("971", 2),
    "ALL": Currency("008", 2),
    "AMD": Currency("051", 2),
    "ANG": Currency("532", 2),
    "AOA": Currency("973", 2),
    "ARS": Currency("032", 2),
    "AUD": Currency("036", 2),
    "AWG": Currency("533", 2),
    "AZN": Currency("944", 2),
    "BAM": Currency("977", 2),
    "BBD": Currency("052", 2),
    "BDT": Currency("050", 2),
    "BGN": Currency("975", 2),
    "BHD": Currency("048", 3),
    "BIF": Currency("108", 0),
    "BMD": Currency("060", 2),
    "BND": Currency("096", 2),
    "BOB": Currency("068", 2),
    "BOV": Currency("984", 2),
    "BRL": Currency("986", 2),
    "BSD": Currency("044", 2),
    "BTN": Currency("064", 2),
    "BWP": Currency("072", 2),
    "BYR": Currency("974", 0),
    "BZD": Currency("084", 2),
    "CAD": Currency("124", 2),
    "CDF": Currency("976", 2),
    "CHE": Currency("947", 2),
    "CHF": Currency("756", 2),
    "CHW": Currency("948", 2),
    "CLF": Currency("990", 0),
    "CLP": Currency("152", 0),
    "CNY": Currency("156", 2),
    "COP": Currency("170", 2),
    "COU": Currency("970", 2),
    "CRC": Currency("188", 2),
    "CUP": Currency("192", 2),
    "CVE": Currency("132", 2),
    "CYP": Currency("196", 2),
    "CZK": Currency("203", 2),
    "DJF": Currency("262", 0),
    "DKK": Currency("208", 2),
    "DOP": Currency("214", 2),
    "DZD": Currency("012", 2),
    "EEK": Currency("233", 2),
    "EGP": Currency("818", 2),
    "ERN": Currency("232", 2),
    "ETB": Currency("230", 2),
    "EUR": Currency("978", 2),
    "FJD": Currency("242", 2),
    "FKP": Currency("238", 2),
    "GBP": Currency("826", 2),
    "GEL": Currency("981", 2),
    "GHS": Currency("288", 2),
    "GIP": Currency("292", 2),
    "GMD": Currency("270", 2),
    "GNF": Currency("324", 0),
    "GTQ": Currency("320", 2),
    "GYD": Currency("328", 2),
    "HKD": Currency("344", 2),
    "HNL": Currency("340", 2),
    "HRK": Currency("191", 2),
    "HTG": Currency("332", 2),
    "HUF": Currency("348", 2),
    "IDR": Currency("360", 2),
    "ILS": Currency("376", 2),
    "INR": Currency("356", 2),
    "IQD": Currency("368", 3),
    "IRR": Currency("364", 2),
    "ISK": Currency("352", 2),
    "JMD": Currency("388", 2),
    "JOD": Currency("400", 3),
    "JPY": Currency("392", 0),
    "KES": Currency("404", 2),
    "KGS": Currency("417", 2),
    "KHR": Currency("116", 2),
    "KMF": Currency("174", 0),
    "KPW": Currency("408", 2),
    "KRW": Currency("410", 0),
    "KWD": Currency("414", 3),
    "KYD": Currency("136", 2),
    "KZT": Currency("398", 2),
    "LAK": Currency("418", 2),
    "LBP": Currency("422", 2),
    "LKR": Currency("144", 2),
    "LRD": Currency("430", 2),
    "LSL": Currency("426", 2),
    "LTL": Currency("440", 2),
    "LVL": Currency("428", 2),
    "LYD": Currency("434", 3),
    "MAD": Currency("504", 2),
    "MDL": Currency("498", 2),
    "MGA": Currency("969", 0),
    "MKD": Currency("807", 2),
    "MMK": Currency("104", 2),
    "MNT": Currency("496", 2),
    "MOP": Currency("446", 2),
    "MRO": Currency("478", 2),
    "MTL": Currency("470", 2),
    "MUR": Currency("480", 2),
    "MVR": Currency("462", 2),
    "MWK": Currency("454", 2),
    "MXN": Currency("484", 2),
    "MXV": Currency("979", 2),
    "MYR": Currency("458", 2),
    "MZN": Currency("943", 2),
    "NAD": Currency("516", 2),
    "NGN": Currency("566", 2),
    "NIO": Currency("558", 2),
    "NOK": Currency("578", 2),
    "NPR": Currency("524", 2),
    "NZD": Currency("554", 2),
    "OMR": Currency("512", 3),
    "PAB": Currency("590", 2),
    "PEN": Currency("604", 2),
    "PGK": Currency("598", 2),
    "PHP": Currency("608", 2),
    "PKR": Currency("586", 2),
    "PLN": Currency("985", 2),
    "PYG": Currency("600", 0),
    "QAR": Currency("634", 2),
    "ROL": Currency("642", 2),
    "RON": Currency("946", 2),
    "RSD": Currency("941", 2),
    "RUB": Currency("643", 2),
    "RWF": Currency("646", 0),
    "SAR": Currency("682", 2),
    "SBD": Currency("090", 2),
    "SCR": Currency("690", 2),
    "SDG": Currency("938", 2),
    "SEK": Currency("752", 2),
    "SGD": Currency("702", 2),
    "SHP": Currency("654", 2),
    "SKK": Currency("703", 2),
    "SLL": Currency("694", 2),
    "SOS": Currency("706", 2),
    "SRD": Currency("968", 2),
    "STD": Currency("678", 2),
    "SYP": Currency("760", 2),
    "SZL": Currency("748", 2),
    "THB": Currency("764", 2),
    "TJS": Currency("972", 2),
    "TMM": Currency("795", 2),
    "TND": Currency("788", 3),
    "TOP": Currency("776", 2),
    "TRY": Currency("949", 2),
    "TTD": Currency("780", 2),
    "TWD": Currency("901", 2),
    "TZS": Currency("834", 2),
    "UAH": Currency("980", 2),
    "UGX": Currency("800", 2),
    "USD": Currency("840", 2),
    "USN": Currency("997", 2),
    "USS": Currency("998", 2),
    "UYU": Currency("858", 2),
    "UZS": Currency("860", 2),
    "VEB": Currency("862", 2),
    "VND": Currency("704", 2),
    "VUV": Currency("548", 0),
    "WST": Currency("882", 2),
    "XAF": Currency("950", 0),
    "XAG": Currency("961", 0),
    "XAU": Currency("959", 0),
    "XBA": Currency("955", 0),
    "XBB": Currency("956", 0),
    "XBC": Currency("957", 0),
    "XBD": Currency("958", 0),
    "XCD": Currency("951", 2),
    "XDR": Currency("960", 0),
    "XOF": Currency("952", 0),
    "XPD": Currency("964", 0),
    "XPF": Currency("953", 0),
    "XPT": Currency("962", 0),
    "XTS": Currency("963", 0),
    "XXX": Currency("999", 0),
    "YER": Currency("886", 2),
    "ZAR": Currency("710", 2),
    "ZMK": Currency("894", 2),
    "ZWD": Currency("716", 2),
}

NUMERIC_TO_ALPHA = {currency.numeric: code for code, currency in CURRENCIES.items()}
